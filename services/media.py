from .core import PLACEHOLDER_IMAGE


def pick_image(sprites) -> str:
    """Pick the best available image from a /pokemon `sprites` object.
    Official artwork first, then the default sprite, then any other artwork,
    finally the local placeholder. Never returns an empty string.
    """
    sprites = sprites or {}
    other = sprites.get('other') or {}
    art = (other.get('official-artwork') or {}).get('front_default')
    if not art:
        art = sprites.get('front_default')
    if not art:
        for k in other.values():
            if isinstance(k, dict) and k.get('front_default'):
                art = k['front_default']
                break
    return art or PLACEHOLDER_IMAGE
