"""stackwright scaffolder -- materializes a validated stack on disk.

Quick usage::

    from stackwright.scaffolder import ProjectGenerator

    generator = ProjectGenerator(config, selection, secrets)
    result = await generator.generate()
"""

from stackwright.scaffolder.generator import (
    GenerationError,
    GenerationResult,
    GenerationStep,
    ProjectGenerator,
)
from stackwright.scaffolder.strategies import (
    TemplateResolutionError,
    has_template,
    require_template,
)
from stackwright.scaffolder.templates import TemplateRenderer

__all__ = [
    "GenerationError",
    "GenerationResult",
    "GenerationStep",
    "ProjectGenerator",
    "TemplateRenderer",
    "TemplateResolutionError",
    "has_template",
    "require_template",
]
