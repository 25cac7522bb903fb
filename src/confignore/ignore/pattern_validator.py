"""
Syntax validation for candidate ignore patterns
"""

from typing import List

import pathspec

from ..models import PatternValidation


def compile_pattern(body: str) -> pathspec.PathSpec:
    """Compile one un-negated pattern with the gitwildmatch dialect"""
    return pathspec.PathSpec.from_lines('gitwildmatch', [body])


def validate_ai_ignore_pattern(pattern: str) -> PatternValidation:
    """
    Validate a single pattern before it is trusted

    Args:
        pattern: Candidate pattern, possibly negated with a leading '!'

    Returns:
        PatternValidation with the trimmed pattern; never raises
    """
    trimmed = pattern.strip() if isinstance(pattern, str) else ''
    errors: List[str] = []

    if not trimmed:
        return PatternValidation(valid=False, pattern='', errors=['Pattern is empty'])

    if trimmed == '!':
        return PatternValidation(valid=False, pattern=trimmed,
                                 errors=['Negation pattern must include a rule'])

    body = trimmed[1:] if trimmed.startswith('!') else trimmed
    try:
        compile_pattern(body)
    except Exception as e:
        errors.append(str(e) or 'Invalid glob pattern')

    return PatternValidation(
        valid=not errors,
        pattern=trimmed,
        errors=errors or None,
    )
