"""
Minefield backend that delegates to a field implemented in a Python script.

The script is loaded from source at runtime and treated as an opaque
evaluation context: every call into it goes through one module-wide lock, and
anything it raises other than its own explosion signal is reported as a
CapabilityFault.
"""

import importlib.util
import logging
import threading
from pathlib import Path
from types import ModuleType
from typing import Any, Dict, Optional, Tuple, Union

from .errors import BadIndex, CapabilityFault
from .field import DETONATED, Outcome
from .utils import in_bounds

logger = logging.getLogger(__name__)

EXPLOSION_EXCEPTION_NAME = "ExplosionException"
BUNDLED_SCRIPT = Path(__file__).parent / "data" / "mine_field.py"

# preset name -> module attribute holding its keyword arguments
PRESET_ATTRIBUTES: Dict[str, str] = {
    "beginner": "BEGINNER_FIELD",
    "intermediate": "INTERMEDIATE_FIELD",
    "expert": "EXPERT_FIELD",
}

# Serializes every call into scripted code, across all fields and threads.
_SCRIPT_LOCK = threading.Lock()


class ScriptedMinefield:
    """Adapter exposing a scripted ``sweep_cell`` field as a Minefield."""

    def __init__(self, field: Any, width: int, height: int, mine_count: int) -> None:
        self._field = field
        self._width = width
        self._height = height
        self._mine_count = mine_count

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def mine_count(self) -> int:
        return self._mine_count

    def sweep(self, col: int, row: int) -> Outcome:
        """
        Sweep one cell through the script.

        Raises:
            BadIndex: If (col, row) is outside the field.
            CapabilityFault: If the script fails or answers nonsense.
        """
        if not in_bounds(col, row, self._width, self._height):
            raise BadIndex(col, row, self._width, self._height)

        try:
            with _SCRIPT_LOCK:
                result = self._field.sweep_cell(col, row)
        except Exception as exc:
            if type(exc).__name__ == EXPLOSION_EXCEPTION_NAME:
                return DETONATED
            raise CapabilityFault(
                f"Scripted field failed sweeping ({col}, {row}): {exc!r}"
            ) from exc

        if isinstance(result, bool) or not isinstance(result, int):
            raise CapabilityFault(
                f"Scripted field returned {result!r} for ({col}, {row}); expected an int."
            )
        try:
            return Outcome.cleared(result)
        except ValueError as exc:
            raise CapabilityFault(
                f"Scripted field returned {result!r} for ({col}, {row})."
            ) from exc


class ScriptedFieldBuilder:
    """Loads a field script once and builds fresh fields from its presets."""

    def __init__(self, module: ModuleType) -> None:
        field_class = getattr(module, "MineField", None)
        if field_class is None:
            raise CapabilityFault(
                f"Field script {module.__name__!r} defines no MineField class."
            )
        self.module = module
        self.field_class = field_class
        self.presets: Dict[str, Tuple[int, int, int, Dict[str, Any]]] = {}

        for name, attribute in PRESET_ATTRIBUTES.items():
            kwargs = getattr(module, attribute, None)
            if kwargs is None:
                continue
            if not isinstance(kwargs, dict):
                raise CapabilityFault(f"{attribute} must be a dict, got {type(kwargs)}.")
            try:
                width = int(kwargs["width"])
                height = int(kwargs["height"])
                mines = int(kwargs["number_of_mines"])
            except (KeyError, TypeError, ValueError) as exc:
                raise CapabilityFault(f"Malformed preset {attribute}: {kwargs!r}") from exc
            self.presets[name] = (width, height, mines, dict(kwargs))

    @classmethod
    def from_source(
        cls, path: Union[str, Path], module_name: str = "mine_field"
    ) -> "ScriptedFieldBuilder":
        """
        Execute a field script from its source file.

        Raises:
            CapabilityFault: If the file cannot be loaded or executed.
        """
        path = Path(path)
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise CapabilityFault(f"Cannot load field script from {path}.")

        module = importlib.util.module_from_spec(spec)
        try:
            with _SCRIPT_LOCK:
                spec.loader.exec_module(module)
        except Exception as exc:
            raise CapabilityFault(f"Field script {path} failed to execute: {exc!r}") from exc

        logger.debug("loaded field script %s", path)
        return cls(module)

    @classmethod
    def bundled(cls) -> "ScriptedFieldBuilder":
        """Builder for the reference script shipped with the package."""
        return cls.from_source(BUNDLED_SCRIPT)

    def build(self, preset: str, seed: Optional[int] = None) -> ScriptedMinefield:
        """
        Instantiate a fresh scripted field for a preset.

        Args:
            preset: Preset name ("beginner", "intermediate", "expert").
            seed: Optional seed passed through to scripts that accept one.

        Raises:
            CapabilityFault: If the script lacks the preset or fails to build it.
        """
        entry = self.presets.get(preset.lower())
        if entry is None:
            raise CapabilityFault(f"Field script has no {preset!r} preset.")

        width, height, mines, kwargs = entry
        if seed is not None:
            kwargs = dict(kwargs, seed=seed)

        try:
            with _SCRIPT_LOCK:
                field = self.field_class(**kwargs)
        except Exception as exc:
            raise CapabilityFault(f"Field script failed to build {preset!r}: {exc!r}") from exc

        return ScriptedMinefield(field, width, height, mines)
