from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - typing aid only
    from quantmath.units.registry import UnitsRegistry
# Lazy access helpers -------------------------------------------------------

def _get_default_registry() -> "UnitsRegistry":
    # Import here to avoid import-time side-effects / circular imports.
    from quantmath.units.registry import DEFAULT_REGISTRY  # local import
    return DEFAULT_REGISTRY

def __getattr__(name: str) -> Any:
    """
    Lazy attribute access. Accessing 'DEFAULT_REGISTRY' builds the default
    registry on first use; core.unit imports this package for its prefixes,
    so nothing heavy may be imported eagerly here.
    """
    if name == "DEFAULT_REGISTRY":
        return _get_default_registry()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

def __dir__() -> list[str]:
    # Improve discoverability in REPL / autocomplete.
    return sorted(list(globals().keys()) + ["DEFAULT_REGISTRY"])
