import pathlib, re, unicodedata, chardet

_SLASHES = re.compile(r"[\\/]+")
_SPACES = re.compile("[\u00a0\u202f]")

def normalize_path(path: str) -> str:
    # vault-relative, forward slashes, no leading/trailing separators
    p = _SLASHES.sub("/", path or "")
    p = _SPACES.sub(" ", p)
    p = p.strip("/")
    p = unicodedata.normalize("NFC", p)
    return p or "/"

def read_text_safely(path: pathlib.Path):
    try:
        data = path.read_bytes()
    except OSError:
        return None
    if not data:
        return ""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        pass
    enc = chardet.detect(data).get('encoding') or 'utf-8'
    return data.decode(enc, errors='ignore')

def create_text_file(path: pathlib.Path, text: str) -> None:
    # mode "x": refuse to overwrite, the caller reports the collision
    with path.open("x", encoding="utf-8", newline="\n") as f:
        f.write(text)
