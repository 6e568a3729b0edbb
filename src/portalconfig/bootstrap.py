"""Template bootstrap composed from an ordered list of providers.

The bootstrap is built once when the service is assembled and never
mutated afterwards. Lookups go to the first provider that declares the
requested owner type or page template, so providers listed later
supplement earlier ones rather than replace them.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .exceptions import ConfigurationError, TemplateNotFoundError
from .interfaces import TemplateProvider
from .models import Page

logger = logging.getLogger(__name__)


class CompositeTemplateBootstrap:
    """Immutable composition of template providers.

    Example::

        bootstrap = CompositeTemplateBootstrap([core_templates, extension_templates])
        service = UserPortalConfigService(store, gate, directory, sink, bootstrap=bootstrap)
    """

    __slots__ = ("_providers",)

    def __init__(self, providers: Iterable[TemplateProvider]) -> None:
        self._providers: tuple[TemplateProvider, ...] = tuple(providers)

    @property
    def providers(self) -> tuple[TemplateProvider, ...]:
        return self._providers

    def _provider_for_owner_type(self, owner_type: str) -> TemplateProvider:
        for provider in self._providers:
            if owner_type in provider.owner_types:
                return provider
        raise ConfigurationError(
            f"No template bootstrap registered for owner type '{owner_type}'",
            owner_type=owner_type,
        )

    def _provider_for_page_template(self, template_key: str) -> TemplateProvider:
        for provider in self._providers:
            if template_key in provider.page_templates:
                return provider
        raise TemplateNotFoundError(
            f"Unknown page template '{template_key}'",
            template_key=template_key,
        )

    def materialize(self, owner_type: str, name: str, template_key: str) -> None:
        provider = self._provider_for_owner_type(owner_type)
        logger.info("Materializing %s '%s' from template '%s'", owner_type, name, template_key)
        provider.materialize(owner_type, name, template_key)

    def page_from_template(self, owner_type: str, owner_id: str, template_key: str) -> Page:
        provider = self._provider_for_page_template(template_key)
        return provider.page_from_template(owner_type, owner_id, template_key)

    def default_portal_name(self) -> Optional[str]:
        for provider in self._providers:
            name = provider.default_portal_name()
            if name:
                return name
        return None

    def import_initial_data(self) -> None:
        """Run every provider's import in registration order. Errors propagate."""
        for provider in self._providers:
            provider.import_initial_data()

    def __repr__(self) -> str:
        return f"CompositeTemplateBootstrap(providers={len(self._providers)})"


__all__ = ["CompositeTemplateBootstrap"]
