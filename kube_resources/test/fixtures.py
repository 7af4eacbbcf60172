import json
import os
from typing import Any

from kube_resources.utils.ruamel import create_ruamel_instance


class Fixtures:
    def __init__(self, base_path: str):
        self.base_path = base_path

    def path(self, fixture: str) -> str:
        return os.path.join(
            os.path.dirname(__file__), "fixtures", self.base_path, fixture
        )

    def get(self, fixture: str) -> str:
        with open(self.path(fixture), encoding="utf-8") as f:
            return f.read().strip()

    def get_yaml(self, fixture: str) -> Any:
        return create_ruamel_instance(preserve_quotes=False).load(self.get(fixture))

    def get_json(self, fixture: str) -> Any:
        return json.loads(self.get(fixture))
