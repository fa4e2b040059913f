_APOSTROPHES = {"’": "'", "‘": "'", "´": "'", "`": "'"}


def normalize_apostrophes(text: str) -> str:
    for src, dst in _APOSTROPHES.items():
        text = text.replace(src, dst)
    return text


def clean_name(name: str) -> str:
    return (name or "").strip()


def can_save_exercise(name: str, text: str) -> bool:
    return bool(clean_name(name)) and bool(text)


def can_rename(new_name: str, old_name: str) -> bool:
    new_name = clean_name(new_name)
    return bool(new_name) and new_name != old_name
