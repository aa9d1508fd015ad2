import re

_UNSAFE = re.compile(r"[^a-zA-Z0-9]")

def clean_id(node_id: str) -> str:
    # one output char per input code point
    return _UNSAFE.sub("_", node_id)

def safe_escape(label: str) -> str:
    return label.replace('"', '\\"')
