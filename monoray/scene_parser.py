"""
Scene description parser.

Supports two formats that both produce instruction tuples for
SceneBuilder.

The line-based instruction language::

    # camera at z=5 looking at the origin through a 2x2 viewport
    looker [0 0 5] [0 0 0] 2 2
    light [5 5 5]
    sphere [0 0 -5] 1
    ambient 0.1
    specular 0.5 20
    plane [0 -1 0] <0 1 0>
    reflexion 0.4

Brackets are only decoration, `[0 0 5]` reads as three numbers.

A YAML (or JSON) file with a `scene` list and optional `render` settings:
```yaml
render:
  width: 256
  height: 256
  threads: 4

scene:
  - looker: {position: [0, 0, 5], center: [0, 0, 0], width: 2, height: 2}
  - light: [5, 5, 5]
  - sphere: {center: [0, 0, -5], radius: 1}
  - specular: {ratio: 0.5, exponent: 20}
  - plane [0 -1 0] <0 1 0>
```
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
import json
import logging

import yaml

from .vec3 import Point, Vector
from .scene import Scene, SceneBuilder, SceneParseError
from .raster import RASTER_TYPES
from .renderer import RenderSettings

logger = logging.getLogger(__name__)

# Characters that are dropped from instruction lines before splitting.
IGNORED_CHARACTERS = '[]<>'

DEFAULT_SCENE = (
    "looker [0 0 5] [0 0 0] 2 2",
    "sphere [0 0 -5] 1",
    "ambient 1",
)


class _Parameters:
    """Reads typed values from the tokens of one instruction."""

    def __init__(self, tokens: List[str], line: str):
        self.tokens = tokens
        self.line = line
        self.position = 0

    def has_next(self) -> bool:
        return self.position < len(self.tokens)

    def next(self) -> str:
        if not self.has_next():
            raise SceneParseError(f"Missing parameter in: {self.line}")
        token = self.tokens[self.position]
        self.position += 1
        return token

    def next_float(self) -> float:
        token = self.next()
        try:
            return float(token)
        except ValueError:
            raise SceneParseError(f"Expected a number, got '{token}' in: {self.line}") from None

    def next_point(self) -> Point:
        return Point(self.next_float(), self.next_float(), self.next_float())

    def next_vector(self) -> Vector:
        return Vector(self.next_float(), self.next_float(), self.next_float())


class SceneParser:
    """Parser for scene description files."""

    # Parameter layout of every instruction: 'p' point, 'v' vector, 'f' number.
    SIGNATURES = {
        'looker': 'ppff',
        'light': 'p',
        'sphere': 'pf',
        'plane': 'pv',
        'ambient': 'f',
        'diffuse': 'f',
        'specular': 'ff',
        'reflexion': 'f',
    }

    def __init__(self):
        self.settings: Optional[RenderSettings] = None

    def parse_line(self, line: str) -> Optional[Tuple]:
        """Turn one line of the instruction language into a tuple.

        Returns:
            The instruction tuple, or None for blank lines and comments
        """
        line = line.strip()
        if not line or line.startswith('#'):
            return None

        cleaned = line.translate({ord(c): None for c in IGNORED_CHARACTERS})
        parameters = _Parameters(cleaned.split(), line)

        name = parameters.next()
        if name not in self.SIGNATURES:
            raise SceneParseError(f"Unknown type \"{name}\"")

        readers = {
            'p': parameters.next_point,
            'v': parameters.next_vector,
            'f': parameters.next_float,
        }
        values = [readers[kind]() for kind in self.SIGNATURES[name]]

        if parameters.has_next():
            raise SceneParseError(f"Too many parameters in: {line}")

        return (name, *values)

    def parse_lines(self, lines) -> Scene:
        """Parse the instruction language.

        Args:
            lines: Iterable of instruction lines

        Returns:
            The assembled scene
        """
        builder = SceneBuilder()
        for line in lines:
            instruction = self.parse_line(line)
            if instruction is not None:
                builder.apply(instruction)
        return builder.build()

    def parse_file(self, filepath: str) -> Scene:
        """Parse a scene file.

        YAML and JSON files may also carry render settings, which are
        stored in `self.settings`.

        Args:
            filepath: Path to the scene file

        Returns:
            The assembled scene
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()
        logger.debug("Parsing scene file %s", path)

        if path.suffix in ('.yaml', '.yml'):
            try:
                data = yaml.safe_load(content)
            except yaml.YAMLError as e:
                raise SceneParseError(f"Invalid YAML in {filepath}: {e}") from e
            return self.parse_dict(data)
        elif path.suffix == '.json':
            try:
                data = json.loads(content)
            except json.JSONDecodeError as e:
                raise SceneParseError(f"Invalid JSON in {filepath}: {e}") from e
            return self.parse_dict(data)

        return self.parse_lines(content.splitlines())

    def parse_dict(self, data: Dict[str, Any]) -> Scene:
        """Parse a scene from a dictionary.

        Args:
            data: Mapping with a `scene` list and optional `render` mapping

        Returns:
            The assembled scene
        """
        if not isinstance(data, dict) or 'scene' not in data:
            raise SceneParseError("Scene description must contain a 'scene' list.")

        if not isinstance(data['scene'], list):
            raise SceneParseError(f"'scene' must be a list, got: {data['scene']}")

        if 'render' in data:
            self._parse_settings(data['render'])

        builder = SceneBuilder()
        for entry in data['scene']:
            if isinstance(entry, str):
                instruction = self.parse_line(entry)
                if instruction is None:
                    continue
            else:
                instruction = self._parse_entry(entry)
            builder.apply(instruction)
        return builder.build()

    def _parse_entry(self, entry: Any) -> Tuple:
        """Parse a single-key mapping such as {'sphere': {...}}."""
        if not isinstance(entry, dict) or len(entry) != 1:
            raise SceneParseError(f"Scene entry must be a single-key mapping: {entry}")

        name, value = next(iter(entry.items()))

        if name == 'looker':
            value = self._mapping(name, value, ('position', 'center', 'width', 'height'))
            return ('looker',
                    self._parse_point(value[0]), self._parse_point(value[1]),
                    self._parse_float(value[2]), self._parse_float(value[3]))
        elif name == 'light':
            if isinstance(value, dict):
                value = self._mapping(name, value, ('position',))[0]
            return ('light', self._parse_point(value))
        elif name == 'sphere':
            value = self._mapping(name, value, ('center', 'radius'))
            return ('sphere', self._parse_point(value[0]), self._parse_float(value[1]))
        elif name == 'plane':
            value = self._mapping(name, value, ('point', 'normal'))
            return ('plane', self._parse_point(value[0]), self._parse_vector(value[1]))
        elif name == 'specular':
            value = self._mapping(name, value, ('ratio', 'exponent'))
            return ('specular', self._parse_float(value[0]), self._parse_float(value[1]))
        elif name in ('ambient', 'diffuse', 'reflexion'):
            return (name, self._parse_float(value))

        raise SceneParseError(f"Unknown type \"{name}\"")

    @staticmethod
    def _mapping(name: str, value: Any, keys: Tuple[str, ...]) -> List[Any]:
        """Read positional parameters from a mapping or a list."""
        if isinstance(value, dict):
            missing = [key for key in keys if key not in value]
            if missing:
                raise SceneParseError(f"'{name}' is missing {', '.join(missing)}")
            return [value[key] for key in keys]
        if isinstance(value, (list, tuple)) and len(value) == len(keys):
            return list(value)
        raise SceneParseError(f"Cannot parse '{name}' from: {value}")

    @staticmethod
    def _parse_float(data: Any) -> float:
        try:
            return float(data)
        except (TypeError, ValueError):
            raise SceneParseError(f"Expected a number, got: {data}") from None

    @staticmethod
    def _parse_int(data: Any) -> int:
        if isinstance(data, bool):
            raise SceneParseError(f"Expected an integer, got: {data}")
        try:
            return int(data)
        except (TypeError, ValueError):
            raise SceneParseError(f"Expected an integer, got: {data}") from None

    @staticmethod
    def _parse_bool(data: Any) -> bool:
        if not isinstance(data, bool):
            raise SceneParseError(f"Expected true or false, got: {data}")
        return data

    def _parse_triple(self, data: Any) -> Tuple[float, float, float]:
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Expected 3 components, got {len(data)}")
            return tuple(self._parse_float(c) for c in data)
        elif isinstance(data, dict):
            return tuple(self._parse_float(data.get(axis, 0)) for axis in 'xyz')
        raise SceneParseError(f"Cannot parse coordinates from: {data}")

    def _parse_point(self, data: Any) -> Point:
        return Point(*self._parse_triple(data))

    def _parse_vector(self, data: Any) -> Vector:
        return Vector(*self._parse_triple(data))

    def _parse_settings(self, settings_data: Any) -> None:
        """Parse render settings section."""
        if not isinstance(settings_data, dict):
            raise SceneParseError(f"'render' must be a mapping, got: {settings_data}")

        defaults = RenderSettings()
        raster = settings_data.get('raster', defaults.raster)
        if not isinstance(raster, str) or raster not in RASTER_TYPES:
            raise SceneParseError(f"Unknown raster type: {raster}")

        for key in ('image', 'output'):
            value = settings_data.get(key)
            if value is not None and not isinstance(value, str):
                raise SceneParseError(f"'{key}' must be a string, got: {value}")

        self.settings = RenderSettings(
            width=self._parse_int(settings_data.get('width', defaults.width)),
            height=self._parse_int(settings_data.get('height', defaults.height)),
            raster=raster,
            num_threads=self._parse_int(settings_data.get('threads', 0)),
            supersample=self._parse_bool(settings_data.get('supersample', defaults.supersample)),
            image=settings_data.get('image', defaults.image),
            output=settings_data.get('output', defaults.output),
        )


def load_scene(filepath: str) -> Scene:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file

    Returns:
        The assembled scene
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(lines) -> Scene:
    """Convenience function to parse instruction lines.

    Args:
        lines: Iterable of instruction lines

    Returns:
        The assembled scene
    """
    parser = SceneParser()
    return parser.parse_lines(lines)


def default_scene() -> Scene:
    """The scene rendered when no scene file is given."""
    return parse_scene(DEFAULT_SCENE)
