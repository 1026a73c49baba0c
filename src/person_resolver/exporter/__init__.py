from person_resolver.exporter.json_exporter import (
    export_result_json,
    result_to_dict,
    serialize_result_to_json_string,
)

__all__ = [
    "export_result_json",
    "result_to_dict",
    "serialize_result_to_json_string",
]
