"""
Coding Rules — PR Review Agent

The fixed rule set every pull request is reviewed against. The same tuple is
rendered into the system prompt (stage 2) and decides which violations block
approval, so it is defined once here and never rebuilt per file or per run.

Rules marked required=True block approval when violated. Optional rules only
produce suggestions.
"""

from .models import ValidationRule


CODING_RULES = (
    ValidationRule(
        name="Code Quality",
        description=(
            "Code should follow best practices and be well-structured, this includes: "
            "no unnecessary comments or leftover debug logging (console.log, print "
            "statements used for debugging), and no effects or re-renders that are "
            "not needed (avoid useEffect when it is not necessary)"
        ),
        required=True,
    ),
    ValidationRule(
        name="Security",
        description="No security vulnerabilities or sensitive data exposure",
        required=True,
    ),
    ValidationRule(
        name="Error Handling",
        description="Proper error handling should be implemented",
        required=True,
    ),
    ValidationRule(
        name="Testing",
        description="New features should include appropriate tests",
        required=False,
    ),
)
