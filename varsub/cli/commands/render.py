"""Render commands: substitute a template file or a single string."""

import json
import logging
import sys
from argparse import Namespace
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from varsub.exceptions import ConversionError, InvalidArgumentError, ScopeValidationError
from varsub.loader import ScopeLoader, parse_pairs
from varsub.variables import SubstitutionEngine, ValueCoercer, ValueShape, get_global_variables

logger = logging.getLogger(__name__)


class OutputDumper(yaml.SafeDumper):
    """Safe YAML dumper that also writes Decimal values as floats."""
    pass


OutputDumper.add_representer(
    Decimal,
    lambda dumper, value: dumper.represent_scalar('tag:yaml.org,2002:float', str(value))
)


def configure_logging(args: Namespace) -> None:
    """Set up logging from --log-level, --debug and --quiet."""
    level_name = 'warning' if args.log_level == 'warn' else args.log_level
    log_level = getattr(logging, level_name.upper())
    if args.debug:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.ERROR

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def load_scopes(args: Namespace, loader: ScopeLoader) -> List[Dict[str, Any]]:
    """
    Build the ordered list of local scopes.

    --var pairs form the first scope (when given), followed by each --scope
    file in command-line order.
    """
    scopes: List[Dict[str, Any]] = []
    if args.var:
        scopes.append(parse_pairs(args.var))
    for scope_file in args.scope or []:
        logger.info(f"Loading scope: {scope_file}")
        scopes.append(loader.load(scope_file))
    return scopes


def load_globals(args: Namespace, loader: ScopeLoader) -> int:
    """Load --global-file and --global pairs into the process global store."""
    global_variables = get_global_variables()
    count = 0
    if args.global_file:
        logger.info(f"Loading global variables: {args.global_file}")
        values = loader.load(args.global_file)
        global_variables.update(values)
        count += len(values)
    if args.globals:
        values = parse_pairs(args.globals)
        global_variables.update(values)
        count += len(values)
    return count


def log_validation_errors(error: ScopeValidationError) -> None:
    for line in str(error).splitlines():
        logger.error(line)


def write_output(text: str, output: Optional[str]) -> None:
    """Write text to the output file, or stdout when none is given."""
    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open('w', encoding='utf-8') as f:
            f.write(text)
        logger.info(f"Wrote output to {output_path}")
    else:
        sys.stdout.write(text)
        if not text.endswith('\n'):
            sys.stdout.write('\n')


def format_document(value: Any, output_format: str) -> str:
    """Serialize a substituted template as YAML or JSON."""
    if output_format == 'json':
        return json.dumps(value, indent=2, default=str) + '\n'
    return yaml.dump(value, Dumper=OutputDumper, sort_keys=False, allow_unicode=True)


def render_template(args: Namespace) -> int:
    """
    Substitute a YAML/JSON template file.

    Returns:
        0 on success, 1 on I/O or conversion failure, 2 on validation errors
    """
    configure_logging(args)

    template_path = Path(args.template)
    if not template_path.exists():
        logger.error(f"Template file not found: {template_path}")
        return 1

    loader = ScopeLoader()
    try:
        logger.info(f"Loading template: {template_path}")
        template = loader.load_template(template_path)
        scopes = load_scopes(args, loader)
        load_globals(args, loader)
    except ScopeValidationError as e:
        log_validation_errors(e)
        return e.exit_code

    engine = SubstitutionEngine()
    try:
        result = engine.substitute(
            template,
            shape=ValueShape.STRING,
            default=args.default,
            recurse=args.recurse,
            include_nulls=args.include_nulls,
            substitution_type=args.substitution_type,
            scopes=scopes
        )
    except InvalidArgumentError as e:
        logger.error(f"Invalid argument: {e}")
        return 2
    except ConversionError as e:
        logger.error(f"Substitution failed: {e}")
        return 1

    try:
        write_output(format_document(result, args.format), args.output)
    except OSError as e:
        logger.error(f"Failed to write output: {e}")
        return 1

    return 0


def render_text(args: Namespace) -> int:
    """
    Substitute a single string and print the result.

    Returns:
        0 on success, 1 on conversion or write failure, 2 on validation errors
    """
    configure_logging(args)

    loader = ScopeLoader()
    try:
        scopes = load_scopes(args, loader)
        load_globals(args, loader)
    except ScopeValidationError as e:
        log_validation_errors(e)
        return e.exit_code

    engine = SubstitutionEngine()
    try:
        result = engine.substitute_string(args.text, args.shape, args.default, args.substitution_type, *scopes)
        text = ValueCoercer().coerce(result, ValueShape.STRING)
    except InvalidArgumentError as e:
        logger.error(f"Invalid argument: {e}")
        return 2
    except ConversionError as e:
        logger.error(f"Substitution failed: {e}")
        return 1

    try:
        write_output('' if text is None else text, args.output)
    except OSError as e:
        logger.error(f"Failed to write output: {e}")
        return 1

    return 0
