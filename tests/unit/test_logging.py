import json
import logging

from flowedit.utils.logging import JsonLogFormatter


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord(
        name="flowedit.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="imported %d nodes",
        args=(3,),
        exc_info=None,
    )
    record.document = "flowchart.json"

    payload = json.loads(JsonLogFormatter().format(record))

    assert payload["message"] == "imported 3 nodes"
    assert payload["logger"] == "flowedit.test"
    assert payload["document"] == "flowchart.json"
