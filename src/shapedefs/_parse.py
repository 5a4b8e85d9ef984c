"""Parse shape declarations into shapes.

Declarations give shapes a name and describe their fields with a small
TypeScript flavored syntax. Later declarations can refer to earlier ones by
name, combine them with `&`, and derive new shapes with any of the classifier
operations.

    shape Profile = {
        name: str
        age?: num
        readonly version: num
        location: str | null
    }
    shape Draft = WithOptional(Profile, age, location)

Declaring a derived shape with a field name the source shape does not have
fails while parsing, with a `DefinitionError`.
"""

__all__ = ["Namespace", "parse_shapes", "parse_shape", "lark_tree"]

import functools
import logging
import operator

import lark
import shapedefs

from ._field import FieldDef
from ._shape import Shape


logger = logging.getLogger(__name__)


class Namespace:
    """Named shapes in declaration order.

    Args:
        filename: (str | None) Source the shapes were declared in

    Attributes:
        filename: (str | None) Source the shapes were declared in
    """

    __slots__ = ("filename", "_shapes")

    def __init__(self, filename=None):
        self.filename = filename
        self._shapes = {}

    def define(self, name, shape):
        """Add a named shape.

        Raises:
            DefinitionError: If the name is already defined
        """
        if name in self._shapes:
            raise shapedefs.DefinitionError(f"Shape '{name}' is already defined")
        self._shapes[name] = shape
        return shape

    def lookup(self, name):
        """Get a shape by name.

        Raises:
            DefinitionError: If no shape has the name
        """
        try:
            return self._shapes[name]
        except KeyError:
            raise shapedefs.DefinitionError(f"Unknown shape '{name}'") from None

    @property
    def names(self):
        return tuple(self._shapes)

    def items(self):
        return self._shapes.items()

    def __getitem__(self, name):
        return self.lookup(name)

    def __contains__(self, name):
        return name in self._shapes

    def __iter__(self):
        return iter(self._shapes)

    def __len__(self):
        return len(self._shapes)

    def __repr__(self):
        return f"Namespace<{', '.join(self._shapes)}>"


def parse_shapes(source, filename=None, namespace=None):
    """Parse shape declarations.

    Args:
        source: (str) Declaration source text
        filename: (str | None) Name used in diagnostics
        namespace: (Namespace | None) Existing shapes to extend, a new
            namespace is created when not given

    Returns:
        (Namespace) Declared shapes

    Raises:
        ParseError: If the source has a syntax error
        DefinitionError: If a declaration is invalid
    """
    tree = _parse_tree(source, "module")
    if namespace is None:
        namespace = Namespace(filename)

    for decl in tree.children:
        name_token, expr = decl.children
        name = str(name_token)
        shape = _convert_expr(expr, namespace)
        namespace.define(name, shape.rename(name))
        logger.debug("Declared shape %s with %d fields", name, len(shape))
    return namespace


def parse_shape(source, namespace=None):
    """Parse a single shape expression.

    The expression can be a field body like `{name: str}`, or refer to
    shapes already declared in `namespace`.

    Returns:
        (Shape) Parsed shape

    Raises:
        ParseError: If the source has a syntax error
        DefinitionError: If the expression is invalid
    """
    tree = _parse_tree(source, "shape_expr")
    return _convert_expr(tree, namespace)


def lark_tree(source, start=None):
    """Lark parse tree for diagnostics.

    Without an explicit start rule, source that is not a list of
    declarations is parsed as a single shape expression.
    """
    if start is not None:
        return _parse_tree(source, start)
    try:
        return _parse_tree(source, "module")
    except shapedefs.ParseError as err:
        module_error = err
    try:
        return _parse_tree(source, "shape_expr")
    except shapedefs.ParseError:
        pass
    raise module_error


def _parse_tree(source, start):
    parser = _lark_parser("shapes")
    try:
        return parser.parse(source, start=start)
    except lark.UnexpectedInput as err:
        raise shapedefs.ParseError(_describe(err), _position(err)) from err


def _describe(err):
    if isinstance(err, lark.UnexpectedCharacters):
        return f"Unexpected character {err.char!r}"
    if isinstance(err, lark.UnexpectedToken):
        if err.token.type == "$END":
            return "Unexpected end of input"
        return f"Unexpected {err.token.type} {err.token.value!r}"
    return "Unexpected end of input"


def _position(err):
    line = getattr(err, "line", -1)
    column = getattr(err, "column", -1)
    if line is None or line < 1:
        return None
    return (line, column)


def _convert_expr(tree, namespace):
    """Convert a shape expression tree into a Shape."""
    match tree.data:
        case "shape_expr":
            shapes = [_convert_expr(kid, namespace) for kid in tree.children]
            return functools.reduce(operator.and_, shapes)

        case "shape_ref":
            name = str(tree.children[0])
            if namespace is None:
                raise shapedefs.DefinitionError(
                    f"Unknown shape '{name}' on line {tree.meta.line}")
            return namespace.lookup(name)

        case "shape_call":
            op = str(tree.children[0])
            source = _convert_expr(tree.children[1], namespace)
            names = [str(kid) for kid in tree.children[2:]]
            if op in shapedefs.KEY_OPERATIONS:
                raise shapedefs.DefinitionError(
                    f"'{op}' produces field names, not a shape, on line {tree.meta.line}")
            return shapedefs.derive(op, source, *names)

        case "shape_body":
            fields = [_convert_field(kid) for kid in tree.children]
            return Shape("", fields)

        case _:
            raise ValueError(f"Unhandled grammar rule: {tree.data}")


_MODIFIERS = frozenset(["readonly", "private"])


def _convert_field(tree):
    """Convert a field tree into a FieldDef.

    The last word before the colon is the field name and any earlier words
    are modifiers, so fields can be named `readonly` or `private`.
    """
    flags = {}
    words = []
    kind = "any"
    for kid in tree.children:
        if isinstance(kid, lark.Tree):
            kind, flags["nullable"], undefined = _convert_type(kid)
            flags["optional"] = flags.get("optional", False) or undefined
        elif kid.type == "OPTIONAL":
            flags["optional"] = True
        else:
            words.append(kid)

    *modifiers, name = words
    for word in modifiers:
        flag = str(word)
        if flag not in _MODIFIERS:
            raise shapedefs.ParseError(
                f"Unknown field modifier {flag!r}", (word.line, word.column))
        flags[flag] = True
    return FieldDef(str(name), kind, **flags)


def _convert_type(tree):
    """Convert a type union into its kind and sentinel flags.

    Returns:
        (tuple[str, bool, bool]) Kind, nullable, optional
    """
    kinds = []
    nullable = False
    undefined = False
    for atom in tree.children:
        match atom.data:
            case "kind":
                kinds.append(_kind_text(atom))
            case "null":
                nullable = True
            case "undefined":
                undefined = True
    return " | ".join(kinds) or "any", nullable, undefined


def _kind_text(atom):
    """Rebuild the source text of a kind, including generic arguments."""
    parts = []
    for kid in atom.children:
        if isinstance(kid, lark.Tree):
            args = [_type_text(arg) for arg in kid.children]
            parts.append(f"[{', '.join(args)}]")
        else:
            parts.append(str(kid))
    return "".join(parts)


def _type_text(tree):
    """Source text of a type nested inside generic arguments."""
    atoms = []
    for atom in tree.children:
        if atom.data == "kind":
            atoms.append(_kind_text(atom))
        else:
            atoms.append(str(atom.data))
    return " | ".join(atoms)


_parsers = {}


def _lark_parser(name):
    """Get globally shared lark parser.

    Args:
        name: (str) name of the grammar file (without .lark)

    Returns:
        (lark.Lark) Parser instance
    """
    parser = _parsers.get(name)
    if parser is not None:
        return parser

    path = f"lark/{name}.lark"
    parser = lark.Lark.open(
        path,
        rel_to=__file__,
        parser="lalr",
        start=["module", "shape_expr"],
        propagate_positions=True,
    )
    _parsers[name] = parser
    return parser
