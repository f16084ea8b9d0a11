import io

from rich.console import Console

from anisift.core.exceptions import InvalidQueryError, SourceError
from anisift.ui.error_handler import ErrorHandler


def make_handler():
    handler = ErrorHandler()
    handler.console = Console(file=io.StringIO(), width=120)
    return handler


def test_invalid_query_panel_names_criterion_and_value():
    handler = make_handler()

    handler.handle_error(InvalidQueryError("Invalid episode '3..1'", criterion="episode", value="3..1"))

    output = handler.console.file.getvalue()
    assert "Invalid Query" in output
    assert "episode" in output
    assert "3..1" in output
    assert "Traceback" not in output


def test_traceback_shown_when_requested():
    handler = make_handler()

    try:
        raise SourceError("Malformed feed [rss]", source_name="rss", details="[/broken] markup")
    except SourceError as e:
        handler.handle_error(e, show_traceback=True)

    output = handler.console.file.getvalue()
    assert "Traceback" in output
    assert "Malformed feed [rss]" in output
    assert "[/broken] markup" in output
