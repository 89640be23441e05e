from covbadge.output.json import format_result_json, result_to_dict
from covbadge.output.table import format_result_table

__all__ = ["format_result_json", "format_result_table", "result_to_dict"]
