from datetime import UTC, datetime

import pytest

from kube_resources.exceptions import ResourceDeserializationError
from kube_resources.grafana.models import (
    GrafanaDashboard,
    GrafanaDashboardSpec,
    GrafanaDatasource,
)
from kube_resources.test.fixtures import Fixtures
from kube_resources.utils.serialization import (
    json_deserialize,
    json_serialize,
    to_dict,
    yaml_deserialize,
    yaml_serialize,
)

DASHBOARD_JSON = '{"title": "Cluster Overview", "panels": []}'


def test_spec_defaults() -> None:
    spec = GrafanaDashboardSpec()
    assert spec.datasources is None
    assert spec.json_ is None
    assert to_dict(spec) == {}


def test_spec_only_json() -> None:
    spec = GrafanaDashboardSpec(json=DASHBOARD_JSON)
    assert spec.json_ == DASHBOARD_JSON
    assert spec.datasources is None
    assert to_dict(spec) == {"json": DASHBOARD_JSON}


def test_spec_only_datasources() -> None:
    spec = GrafanaDashboardSpec(
        datasources=[GrafanaDatasource(input_name="DS", datasource_name="Prom")]
    )
    assert spec.json_ is None
    assert to_dict(spec) == {
        "datasources": [{"inputName": "DS", "datasourceName": "Prom"}]
    }


def test_spec_empty_datasources_kept() -> None:
    spec = GrafanaDashboardSpec.model_validate({"datasources": []})
    assert spec.datasources == []
    assert to_dict(spec) == {"datasources": []}


def test_spec_json_is_not_validated() -> None:
    spec = GrafanaDashboardSpec.model_validate(
        {"json": "{not json", "datasources": [{"inputName": "unused"}]}
    )
    assert spec.json_ == "{not json"
    assert spec.datasources == [GrafanaDatasource(input_name="unused")]


def test_spec_json_roundtrip_preserves_order() -> None:
    datasources = [
        GrafanaDatasource(input_name=f"DS_{i}", datasource_name=f"ds-{9 - i}")
        for i in range(10)
    ]
    spec = GrafanaDashboardSpec(datasources=datasources, json=DASHBOARD_JSON)
    result = json_deserialize(GrafanaDashboardSpec, json_serialize(spec))
    assert result.datasources == datasources
    assert result.json_ == DASHBOARD_JSON


def test_spec_yaml_roundtrip_preserves_multiline_json() -> None:
    dashboard_json = '{\n  "panels": [],\n  "title": "Cluster Overview"\n}'
    spec = GrafanaDashboardSpec(
        datasources=[
            GrafanaDatasource(input_name="DS_LOKI", datasource_name="Loki"),
            GrafanaDatasource(input_name="DS_PROMETHEUS", datasource_name="Prom"),
        ],
        json=dashboard_json,
    )
    text = yaml_serialize(spec)
    assert "json: |-\n" in text
    result = yaml_deserialize(GrafanaDashboardSpec, text)
    assert result == spec


def test_datasource_strict_mode() -> None:
    data = {"inputName": "DS", "datasourceName": "Prom", "datasourceUid": "x"}
    assert GrafanaDatasource.model_validate(data) == GrafanaDatasource(
        input_name="DS", datasource_name="Prom"
    )
    with pytest.raises(ValueError, match="datasourceUid"):
        GrafanaDatasource.model_validate(data, context={"strict": True})


def test_dashboard_type_meta() -> None:
    dashboard = GrafanaDashboard()
    assert dashboard.api_version == "integreatly.org/v1alpha1"
    assert dashboard.kind == "GrafanaDashboard"
    assert dashboard.spec == GrafanaDashboardSpec()
    assert GrafanaDashboard.crd_name() == "grafanadashboards.integreatly.org"


def test_dashboard_from_yaml_fixture(grafana_fxt: Fixtures) -> None:
    dashboard = yaml_deserialize(GrafanaDashboard, grafana_fxt.get("dashboard.yaml"))
    assert dashboard.name == "cluster-overview"
    assert dashboard.namespace == "monitoring"
    assert dashboard.metadata.labels == {"app": "grafana"}
    assert dashboard.metadata.resource_version == "4711"
    assert dashboard.metadata.creation_timestamp == datetime(
        2024, 3, 1, 10, 15, 30, 123456, tzinfo=UTC
    )
    assert dashboard.spec.datasources == [
        GrafanaDatasource(input_name="DS_PROMETHEUS", datasource_name="Prometheus"),
        GrafanaDatasource(input_name="DS_LOKI", datasource_name="Loki"),
    ]
    assert dashboard.spec.json_ is not None
    assert dashboard.spec.json_.startswith('{\n  "title": "Cluster Overview"')
    assert dashboard.status == {"phase": "reconciled"}


def test_dashboard_yaml_fixture_strict(grafana_fxt: Fixtures) -> None:
    dashboard = yaml_deserialize(
        GrafanaDashboard, grafana_fxt.get("dashboard.yaml"), strict=True
    )
    assert dashboard.name == "cluster-overview"


def test_dashboard_unknown_fields(grafana_fxt: Fixtures) -> None:
    text = grafana_fxt.get("dashboard_unknown_field.yaml")
    dashboard = yaml_deserialize(GrafanaDashboard, text)
    assert dashboard.spec.json_ is None
    assert dashboard.spec.datasources == [
        GrafanaDatasource(input_name="DS_PROMETHEUS", datasource_name="Prometheus")
    ]
    with pytest.raises(ResourceDeserializationError, match="url"):
        yaml_deserialize(GrafanaDashboard, text, strict=True)


def test_dashboard_wrong_kind() -> None:
    with pytest.raises(ResourceDeserializationError, match="kind must be"):
        yaml_deserialize(
            GrafanaDashboard,
            "apiVersion: integreatly.org/v1alpha1\nkind: GrafanaDataSource\n",
        )


def test_dashboard_yaml_roundtrip(grafana_fxt: Fixtures) -> None:
    dashboard = yaml_deserialize(GrafanaDashboard, grafana_fxt.get("dashboard.yaml"))
    assert yaml_deserialize(GrafanaDashboard, yaml_serialize(dashboard)) == dashboard


@pytest.mark.parametrize(
    "dashboard_json",
    [
        '{\r\n  "title": "Cluster Overview"\r\n}\r\n',
        '{\n  "title": "mixed"\r\n}',
        '{\n  "title": "next\x85line"\n}',
        '{\n  "title": "bell\x07"\n}',
    ],
)
def test_spec_yaml_roundtrip_keeps_special_line_breaks(dashboard_json: str) -> None:
    spec = GrafanaDashboardSpec(json=dashboard_json)
    text = yaml_serialize(spec)
    assert "json: |" not in text
    assert yaml_deserialize(GrafanaDashboardSpec, text).json_ == dashboard_json


def test_dashboard_yaml_plain_numbers_read_as_text() -> None:
    text = """
apiVersion: integreatly.org/v1alpha1
kind: GrafanaDashboard
metadata:
  name: d
  resourceVersion: 4711
  labels:
    release: 2.5
spec:
  datasources:
    - inputName: DS_PROMETHEUS
      datasourceName: 2024
"""
    dashboard = yaml_deserialize(GrafanaDashboard, text, strict=True)
    assert dashboard.metadata.resource_version == "4711"
    assert dashboard.metadata.labels == {"release": "2.5"}
    assert dashboard.spec.datasources == [
        GrafanaDatasource(input_name="DS_PROMETHEUS", datasource_name="2024")
    ]


def test_dashboard_yaml_status_after_spec(grafana_fxt: Fixtures) -> None:
    dashboard = yaml_deserialize(GrafanaDashboard, grafana_fxt.get("dashboard.yaml"))
    assert list(to_dict(dashboard)) == [
        "apiVersion",
        "kind",
        "metadata",
        "spec",
        "status",
    ]
    text = yaml_serialize(dashboard)
    assert text.index("\nspec:\n") < text.index("\nstatus:\n")
