from .domain_resolver import (
    DomainResolver as DomainResolver,
    extra_domain as extra_domain,
    infer_domain as infer_domain,
)
