"""Field naming for mirrored fields.

Turns the fields of a directive and its naming options into an ordered
list of ``FieldMapping`` pairs.  Pure logic with no schema access and no I/O.

Naming rules, in precedence order:

1. ``as_``: names taken verbatim, one per field.
2. ``prefix``: ``"<prefix>_<field>"``.
3. default: ``"<relation>_<field>"``.

Usage:
    from doc_denorm.denormalize.mapping import resolve_field_mappings

    resolve_field_mappings(["name"], "parent")
    # [FieldMapping(source_field='name', dependent_field='parent_name')]
"""

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from doc_denorm.errors import (
    ArityMismatch,
    FieldNameConflict,
    InvalidDirective,
    MissingSourceOption,
)


class FieldMapping(BaseModel):
    """One source field and the dependent field mirroring it.

    Example:
        >>> FieldMapping(source_field="name", dependent_field="parent_name")
        FieldMapping(source_field='name', dependent_field='parent_name')
    """

    model_config = ConfigDict(frozen=True)

    source_field: str
    dependent_field: str


def resolve_field_mappings(
    fields: Sequence[str],
    relation_name: str | None,
    as_: str | Sequence[str] | None = None,
    prefix: str | None = None,
) -> list[FieldMapping]:
    """Resolve the dependent field name of every source field.

    Args:
        fields: Source field names, in declaration order.
        relation_name: The dependent's reference relation (``from``).
        as_: Explicit dependent names; a string counts as a one-item list.
        prefix: Prefix used instead of the relation name.

    Returns:
        Mappings in the order of *fields*.

    Raises:
        MissingSourceOption: If *relation_name* is missing or empty.
        InvalidDirective: If *fields* is empty.
        ArityMismatch: If *as_* does not have one name per field.
        FieldNameConflict: If two fields resolve to the same name.

    Examples:
        >>> [m.dependent_field for m in resolve_field_mappings(["name"], "parent", prefix="p")]
        ['p_name']

        >>> [m.dependent_field for m in resolve_field_mappings(["name"], "parent", as_="supername")]
        ['supername']
    """
    if not relation_name:
        raise MissingSourceOption()

    fields = list(fields)
    if not fields:
        raise InvalidDirective(
            f"At least one field is needed to denormalize from '{relation_name}'."
        )

    if as_ is not None:
        names = [as_] if isinstance(as_, str) else list(as_)
        if len(names) != len(fields):
            raise ArityMismatch(fields, names)
    else:
        stem = prefix or relation_name
        names = [f"{stem}_{field}" for field in fields]

    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise FieldNameConflict(
            f"Fields mirrored from '{relation_name}' share names: {', '.join(duplicates)}"
        )

    return [
        FieldMapping(source_field=field, dependent_field=name)
        for field, name in zip(fields, names)
    ]
