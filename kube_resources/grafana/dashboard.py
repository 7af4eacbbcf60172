import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from kube_resources.exceptions import (
    ConstructResourceError,
    InvalidDashboardJsonError,
)
from kube_resources.grafana.models import (
    GrafanaDashboard,
    GrafanaDashboardSpec,
    GrafanaDatasource,
)
from kube_resources.utils.json import json_dumps, json_loads
from kube_resources.utils.models import ObjectMeta

DATASOURCE_INPUT_TYPE = "datasource"


def build_dashboard(
    name: str,
    dashboard: str | Mapping[str, Any],
    namespace: str | None = None,
    datasources: Mapping[str, str] | None = None,
    labels: Mapping[str, str] | None = None,
) -> GrafanaDashboard:
    """
    Build a GrafanaDashboard resource.

    A ``dashboard`` given as text is stored verbatim, a mapping is stored
    as indented JSON. ``datasources`` maps dashboard input names to Grafana
    datasource names, in the order they are given.
    """
    dashboard_json = (
        dashboard if isinstance(dashboard, str) else json_dumps(dashboard, indent=2)
    )
    try:
        spec = GrafanaDashboardSpec(
            datasources=[
                GrafanaDatasource(input_name=input_name, datasource_name=ds_name)
                for input_name, ds_name in datasources.items()
            ]
            if datasources
            else None,
            json=dashboard_json,
        )
        metadata = ObjectMeta(
            name=name,
            namespace=namespace,
            labels=dict(labels) if labels else None,
        )
        return GrafanaDashboard(metadata=metadata, spec=spec)
    except ValidationError as e:
        raise ConstructResourceError(e) from e


def load_dashboard_document(spec: GrafanaDashboardSpec) -> dict[str, Any] | None:
    if spec.json_ is None:
        return None
    try:
        document = json_loads(spec.json_)
    except json.JSONDecodeError as e:
        raise InvalidDashboardJsonError(e) from e
    if not isinstance(document, dict):
        raise InvalidDashboardJsonError(
            f"expected a JSON object, got {type(document).__name__}"
        )
    return document


def datasource_inputs(document: Mapping[str, Any]) -> list[str]:
    # exported dashboards declare their datasource placeholders in __inputs
    return [
        i["name"]
        for i in document.get("__inputs") or []
        if isinstance(i, Mapping)
        and i.get("type") == DATASOURCE_INPUT_TYPE
        and i.get("name")
    ]


def unmapped_datasource_inputs(spec: GrafanaDashboardSpec) -> list[str]:
    document = load_dashboard_document(spec)
    if document is None:
        return []
    mapped = {ds.input_name for ds in spec.datasources or []}
    unmapped = [i for i in datasource_inputs(document) if i not in mapped]
    for i in unmapped:
        logging.debug(f"dashboard input {i} has no datasource mapping")
    return unmapped
