"""Exception hierarchy for the signage collaborators (the engine itself never raises)."""


class SignageError(Exception):
    """Base application error"""


class SignNotFoundError(SignageError):
    """Referenced sign does not exist in the registry"""

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(f"Sign not found: {reference}")


class TemplateNotFoundError(SignageError):
    """Template id is not in the catalog"""

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Template not found: {template_id}")


class ValidationError(SignageError):
    """Creation or update request violates a hard limit"""


class RulebookError(SignageError):
    """Rulebook YAML is missing or malformed"""
