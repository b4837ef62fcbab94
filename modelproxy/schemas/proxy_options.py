"""Proxy Options - validated configuration surface for registering a proxy.

Invariants:
    - proxy_for: non-empty, whitespace-stripped internal model name (required)
    - proxy_methods: ordered, may be empty; each entry "name" or "prototype.name"
    - strict defaults to False

Design Decisions:
    - field_validator parses method paths once, at composition time
    - Unknown option keys rejected (extra="forbid")
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modelproxy.core.domain_types import OperationDescriptor, ProxyConfig


class ProxyOptions(BaseModel):
    """Options accepted by ProxyContext.proxy()."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    proxy_for: str = Field(min_length=1)
    proxy_methods: tuple[str, ...] = ()
    strict: bool = False

    @field_validator("proxy_for")
    @classmethod
    def strip_proxy_for(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("proxy_for cannot be empty or whitespace")
        return v

    @field_validator("proxy_methods")
    @classmethod
    def check_method_paths(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        for path in v:
            OperationDescriptor.parse(path)
        return v

    def to_config(self, public_type: type) -> ProxyConfig:
        return ProxyConfig(
            public_type=public_type,
            internal_type_name=self.proxy_for,
            operations=tuple(
                OperationDescriptor.parse(path) for path in self.proxy_methods
            ),
            strict=self.strict,
        )
