import sys
from pathlib import Path

import pytest

# Ensure the project src directory is on sys.path for test imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from person_resolver.config import load_config  # noqa: E402
from person_resolver.core.context import ResolutionContext  # noqa: E402
from person_resolver.logging import get_logger  # noqa: E402
from person_resolver.models import EvidenceItem, TargetIdentity  # noqa: E402


@pytest.fixture
def target() -> TargetIdentity:
    return TargetIdentity(first_name="Jane", last_name="Doe", email="jane@acme.com")


@pytest.fixture
def cfg():
    """Packaged configuration with a fixed reference year."""
    return load_config().with_overrides(features={"reference_year": 2024})


@pytest.fixture
def ctx(target, cfg) -> ResolutionContext:
    return ResolutionContext(target=target, config=cfg, logger=get_logger("tests"))


@pytest.fixture
def make_evidence():
    """
    Build an EvidenceItem the same way upstream JSON is parsed:

        make_evidence(url="https://acme.com/jane", email="jane@acme.com")

    ``title`` is the source title; pass an extracted job title through
    ``attributes={"title": ...}``.
    """

    def _make(url="https://example.org/profile", title="", snippet="", domain=None, attributes=None, **fields):
        attrs = dict(attributes or {})
        attrs.update(fields)
        data = {"url": url, "title": title, "snippet": snippet, "attributes": attrs}
        if domain is not None:
            data["domain"] = domain
        return EvidenceItem.from_dict(data)

    return _make
