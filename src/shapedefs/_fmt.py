"""Format shapes as declaration source"""

__all__ = ["format_field", "format_shape", "format_namespace"]


def format_field(field):
    """Format a single field as it appears inside a shape body."""
    parts = []
    if field.private:
        parts.append("private ")
    if field.readonly:
        parts.append("readonly ")
    parts.append(field.name)
    if field.optional:
        parts.append("?")
    parts.append(f": {field.kind}")
    if field.nullable:
        parts.append(" | null")
    return "".join(parts)


def format_shape(shape, name=None, indent="    "):
    """Format a shape as declaration source.

    With a name the result is a full `shape Name = {...}` declaration,
    otherwise only the body is formatted.
    """
    if not len(shape):
        body = "{}"
    else:
        lines = ["{"]
        lines.extend(f"{indent}{format_field(field)}" for field in shape)
        lines.append("}")
        body = "\n".join(lines)
    if name is None:
        return body
    return f"shape {name} = {body}"


def format_namespace(namespace):
    """Format every shape in a namespace as declarations."""
    return "\n\n".join(format_shape(shape, name) for name, shape in namespace.items())
