"""
Model Enumerator.

ModelLoader owns the one-time "load every model definition" step and the
exclusion policy applied on top of the provider's registry.

Lifecycle:
    loader = ModelLoader(provider)
    loader.ensure_loaded()   # idempotent, safe under concurrent callers
    models = loader.enumerate()
"""

import logging
import threading

from admin_schema.core.exceptions import LoadFailure
from admin_schema.schema.provider import MetadataProvider, resolve_or_none

logger = logging.getLogger(__name__)


class ModelLoader:
    """Loads the provider's models once and enumerates the eligible ones."""

    def __init__(self, provider: MetadataProvider):
        self.provider = provider
        self._lock = threading.Lock()
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def ensure_loaded(self) -> None:
        """Load models and pre-resolve relationship targets exactly once.

        Concurrent callers block until the first one finishes. A failed load
        raises LoadFailure and is retried by the next call.
        """
        with self._lock:
            if self._loaded:
                return
            try:
                self.provider.load()
            except Exception as exc:
                raise LoadFailure(f"Could not load model definitions: {exc}") from exc

            unresolved = 0
            for model in self.provider.models():
                if self.provider.is_abstract(model):
                    continue
                try:
                    relationships = self.provider.relationships(model)
                except Exception as exc:
                    # The model is skipped when its schema is built.
                    logger.warning("Cannot list relationships of %s: %s",
                                   self.provider.model_name(model), exc)
                    continue
                for rel in relationships:
                    try:
                        target = resolve_or_none(self.provider, model, rel)
                    except Exception as exc:
                        logger.warning("Cannot resolve %s.%s: %s",
                                       self.provider.model_name(model), rel.name, exc)
                        target = None
                    if target is None:
                        unresolved += 1

            self._loaded = True
            logger.info("Model definitions loaded (%d unresolved relationships)", unresolved)

    def is_excluded(self, model) -> bool:
        provider = self.provider
        return (
            provider.is_abstract(model)
            or provider.is_admin_model(model)
            or provider.is_audit_model(model)
            or provider.is_infrastructure_model(model)
        )

    def enumerate(self) -> list:
        """Eligible model handles in registry order."""
        self.ensure_loaded()
        return [model for model in self.provider.models() if not self.is_excluded(model)]
