import re
from datetime import datetime
from typing import Any, ClassVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    ValidationInfo,
    field_serializer,
    field_validator,
    model_serializer,
    model_validator,
)
from pydantic.alias_generators import to_camel

from kube_resources.utils.datetime_util import (
    from_rfc3339,
    to_utc_microseconds_iso_format,
)

# Regexes for kubernetes objects fields which have to adhere to DNS-1123
DNS_SUBDOMAIN_MAX_LENGTH = 253
DNS_SUBDOMAIN_RE = re.compile(
    r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$"
)
DNS_NAMES_URL = (
    "https://kubernetes.io/docs/concepts/overview/working-with-objects/names/"
)


def is_strict(info: ValidationInfo) -> bool:
    return bool(info.context and info.context.get("strict"))


class KubernetesModel(BaseModel):
    """
    Base class for kubernetes resource models.

    Attributes are snake_case in Python and camelCase on the wire. Unknown
    keys are ignored, unless validation runs with the context
    ``{"strict": True}``, in which case they are rejected.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        # plain yaml scalars such as `resourceVersion: 4711` load as numbers
        coerce_numbers_to_str=True,
    )

    @model_validator(mode="before")
    @classmethod
    def reject_unknown_fields(cls, data: Any, info: ValidationInfo) -> Any:
        if not is_strict(info) or not isinstance(data, dict):
            return data
        known = set()
        for name, field in cls.model_fields.items():
            known.add(name)
            known.add(field.alias or name)
        unknown = sorted(k for k in data if k not in known)
        if unknown:
            raise ValueError(
                f"unknown field(s) for {cls.__name__}: {', '.join(unknown)}"
            )
        return data


class ObjectMeta(KubernetesModel):
    name: str | None = None
    generate_name: str | None = None
    namespace: str | None = None
    labels: dict[str, str] | None = None
    annotations: dict[str, str] | None = None
    uid: str | None = None
    resource_version: str | None = None
    generation: int | None = None
    creation_timestamp: datetime | None = None
    deletion_timestamp: datetime | None = None
    finalizers: list[str] | None = None

    @field_validator("name")
    @classmethod
    def name_is_dns_subdomain(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if len(v) > DNS_SUBDOMAIN_MAX_LENGTH or not DNS_SUBDOMAIN_RE.match(v):
            raise ValueError(
                f'"{v}" is not a valid DNS-1123 subdomain. See {DNS_NAMES_URL}'
            )
        return v

    @field_validator("creation_timestamp", "deletion_timestamp", mode="before")
    @classmethod
    def parse_timestamp(cls, v: Any) -> Any:
        if isinstance(v, str):
            return from_rfc3339(v)
        return v

    @field_serializer("creation_timestamp", "deletion_timestamp")
    def serialize_timestamp(self, v: datetime | None) -> str | None:
        if v is None:
            return None
        return to_utc_microseconds_iso_format(v)


class CustomResource(KubernetesModel):
    """
    Envelope shared by all custom resources.

    Subclasses pin GROUP, VERSION, KIND and PLURAL and add a typed ``spec``.
    A document whose apiVersion or kind does not match the subclass fails
    validation.
    """

    GROUP: ClassVar[str]
    VERSION: ClassVar[str]
    KIND: ClassVar[str]
    PLURAL: ClassVar[str]

    api_version: str = ""
    kind: str = ""
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    status: dict[str, Any] | None = None

    @classmethod
    def api_version_for(cls) -> str:
        if not cls.GROUP:
            return cls.VERSION
        return f"{cls.GROUP}/{cls.VERSION}"

    @classmethod
    def crd_name(cls) -> str:
        return f"{cls.PLURAL}.{cls.GROUP}"

    @model_validator(mode="after")
    def check_type_meta(self) -> "CustomResource":
        expected_api_version = self.api_version_for()
        if not self.api_version:
            self.api_version = expected_api_version
        elif self.api_version != expected_api_version:
            raise ValueError(
                f"apiVersion must be {expected_api_version}, got {self.api_version}"
            )
        if not self.kind:
            self.kind = self.KIND
        elif self.kind != self.KIND:
            raise ValueError(f"kind must be {self.KIND}, got {self.kind}")
        return self

    @model_serializer(mode="wrap")
    def status_last(self, handler: SerializerFunctionWrapHandler) -> Any:
        # subclasses declare spec after the base fields, kubectl puts status last
        data = handler(self)
        if isinstance(data, dict) and "status" in data:
            data["status"] = data.pop("status")
        return data

    @property
    def name(self) -> str | None:
        return self.metadata.name

    @property
    def namespace(self) -> str | None:
        return self.metadata.namespace
