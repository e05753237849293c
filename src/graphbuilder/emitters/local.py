"""In-process, template-based emitter (no network)."""

from __future__ import annotations

from typing import Callable, Dict, Tuple, Union

from ..compiler.spec import WorkflowSpec
from ..core.languages import Language
from ..logging import get_logger
from . import python as python_templates
from . import typescript as typescript_templates
from .base import GeneratedCode, SpecInput, coerce_spec

logger = get_logger(__name__)

_Renderer = Callable[[WorkflowSpec], str]

_TEMPLATES: Dict[Language, Tuple[_Renderer, _Renderer]] = {
    Language.PYTHON: (python_templates.render_stub, python_templates.render_implementation),
    Language.TYPESCRIPT: (typescript_templates.render_stub, typescript_templates.render_implementation),
}


class LocalEmitter:
    """Renders stub/implementation text for a spec with the bundled templates."""

    def emit(self, spec: SpecInput, language: Union[Language, str]) -> GeneratedCode:
        lang = Language.parse(language)
        wf = coerce_spec(spec)
        render_stub, render_impl = _TEMPLATES[lang]
        out = GeneratedCode(language=lang, stub=render_stub(wf), implementation=render_impl(wf))
        logger.debug("Rendered %s artifacts for '%s' locally", lang.value, wf.name)
        return out
