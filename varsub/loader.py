"""Loading of templates, local scopes and global variables from YAML/JSON files."""

import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union
import yaml

from varsub.exceptions import ScopeValidationError, ValidationError

logger = logging.getLogger(__name__)


class PreservingLoader(yaml.SafeLoader):
    """YAML loader that keeps 'on', 'off', 'yes', 'no' as strings instead of booleans."""
    pass


# Strip the implicit bool resolver so template text like 'on' survives as text;
# only the 'true'/'false' spellings remain booleans
PreservingLoader.yaml_implicit_resolvers = {
    first: [
        (tag, regexp) for tag, regexp in resolvers
        if tag != 'tag:yaml.org,2002:bool'
    ]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
PreservingLoader.add_implicit_resolver(
    'tag:yaml.org,2002:bool',
    re.compile(r'^(?:true|True|TRUE|false|False|FALSE)$'),
    list('tTfF')
)


class ScopeLoader:
    """Loads and validates scope, globals and template files."""

    SUPPORTED_SUFFIXES = {'.yaml', '.yml', '.json'}

    def __init__(self):
        """Initialize loader."""
        self.errors: List[ValidationError] = []

    def load(self, path: Union[str, Path]) -> Dict[str, Any]:
        """
        Load a scope or globals file; its top level must be a mapping.

        Args:
            path: Path to a YAML or JSON file

        Returns:
            The mapping, key order preserved

        Raises:
            ScopeValidationError: If the file cannot be read or is not a mapping
        """
        path = Path(path)
        data = self._read(path)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            self._add_error(f"Top level must be a mapping, got {type(data).__name__}", str(path))
        else:
            for key in data.keys():
                if not isinstance(key, str):
                    self._add_error(f"Keys must be strings, got {type(key).__name__} key {key!r}", str(path))

        self._raise_if_errors()
        logger.debug(f"Loaded {len(data)} variable(s) from {path}")
        return data

    def load_template(self, path: Union[str, Path]) -> Any:
        """Load a template file; any YAML value is accepted."""
        path = Path(path)
        data = self._read(path)
        self._raise_if_errors()
        return data

    def _read(self, path: Path) -> Any:
        self.errors = []
        if path.suffix.lower() not in self.SUPPORTED_SUFFIXES:
            self._add_error(
                f"Unsupported file type '{path.suffix}'. Supported: {sorted(self.SUPPORTED_SUFFIXES)}",
                str(path)
            )
            self._raise_if_errors()

        try:
            with open(path, 'r', encoding='utf-8') as f:
                # JSON is a subset of YAML, one loader covers both
                return yaml.load(f, Loader=PreservingLoader)
        except (OSError, yaml.YAMLError) as e:
            self._add_error(f"Failed to load file: {e}", str(path))
            self._raise_if_errors()

    def _add_error(self, message: str, path: str = ""):
        self.errors.append(ValidationError(message=message, path=path))

    def _raise_if_errors(self):
        if self.errors:
            errors, self.errors = self.errors, []
            raise ScopeValidationError(errors)


def parse_pairs(pairs: Optional[Iterable[str]]) -> Dict[str, str]:
    """
    Parse KEY=VALUE pairs into an ordered mapping.

    Raises:
        ScopeValidationError: If a pair has no '=' or an empty key
    """
    values: Dict[str, str] = {}
    errors: List[ValidationError] = []
    for pair in pairs or ():
        if '=' not in pair:
            errors.append(ValidationError(f"Invalid pair (expected KEY=VALUE): {pair}"))
            continue
        key, value = pair.split('=', 1)
        if not key:
            errors.append(ValidationError(f"Invalid KEY in pair: {pair}"))
            continue
        values[key] = value

    if errors:
        raise ScopeValidationError(errors)
    return values
