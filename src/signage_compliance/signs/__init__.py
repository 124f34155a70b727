"""Sign documents — data model, references, templates, session registry."""

from signage_compliance.signs.models import Sign, SignElement, SignMetadata
from signage_compliance.signs.reference import make_reference

__all__ = ["Sign", "SignElement", "SignMetadata", "make_reference"]
