"""Pydantic models for the GrafanaDashboard custom resource (integreatly.org/v1alpha1)."""

from typing import ClassVar

from pydantic import Field

from kube_resources.utils.models import CustomResource, KubernetesModel

GRAFANA_GROUP = "integreatly.org"
GRAFANA_VERSION = "v1alpha1"


class GrafanaDatasource(KubernetesModel):
    """Maps a datasource input of an exported dashboard to a Grafana datasource.

    Attributes:
        input_name: Name of the ``__inputs`` entry in the dashboard JSON
        datasource_name: Name of the Grafana datasource the input resolves to
    """

    input_name: str | None = None
    datasource_name: str | None = None


class GrafanaDashboardSpec(KubernetesModel):
    """Grafana dashboard.

    Both fields are optional and independent of each other. ``json`` is kept
    as opaque text, it is not parsed or checked against ``datasources``.

    Attributes:
        datasources: The list of data sources, order is preserved
        json_: The JSON describing the dashboard, ``json`` on the wire
    """

    datasources: list[GrafanaDatasource] | None = None
    json_: str | None = Field(None, alias="json")


class GrafanaDashboard(CustomResource):
    GROUP: ClassVar[str] = GRAFANA_GROUP
    VERSION: ClassVar[str] = GRAFANA_VERSION
    KIND: ClassVar[str] = "GrafanaDashboard"
    PLURAL: ClassVar[str] = "grafanadashboards"

    spec: GrafanaDashboardSpec = Field(default_factory=GrafanaDashboardSpec)
