"""
UpdateCommand — Send a new Attribute value

Flow:
1. Resolve the attribute's value type (registry, else ask the operator)
2. Read the value text and encode it
3. Register the attribute spec on the mutation link (once per session)
4. Send a new Attribute stamped now, attributed to the session origin

Nothing is sent if the type is unresolved or the text does not encode.
"""

from typing import List

from . import Keyword
from ..commands.base import BaseCommand
from ..core.errors import UsageError
from ..core.model import Attribute, now_ms
from ..presentation.formatters import format_attribute


KEYWORD = Keyword.UPDATE
USAGE = "update ID ATTR"


class UpdateCommand(BaseCommand):

    USAGE = USAGE

    def update(self, args: List[str]):
        """
        Raises:
            UsageError: Wrong argument count or read-only session
            NegotiationError: Attribute type not resolved
            ValueEncodingError: Value text not valid for the type
            LinkError: World model rejected the update
        """
        self.require_args(args, 2, 2)
        identifier, name = args
        mutation = self.mutation

        value_type = self.negotiator.require(name)

        text = self.console.ask(f"Value for \"{name}\" ({value_type.name}): ")
        if text is None:
            raise UsageError("No value entered.")
        data = value_type.encode(text)

        attribute = Attribute(
            identifier=identifier,
            name=name,
            created=now_ms(),
            data=data,
            origin=self.origin,
        )
        error = attribute.validate()
        if error:
            raise UsageError(error)

        self._cli.ensure_attribute_spec(name)
        self.check_sent(mutation.update_attribute(attribute), f"update of \"{name}\" on \"{identifier}\"")
        self.write(f"Updated \"{identifier}\":")
        self.write(format_attribute(attribute, self.registry))


def handle(cli, args):
    """Handle update command dispatch."""
    cli._update_cmd.update(args)
