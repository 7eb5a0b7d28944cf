from __future__ import annotations
import string
from memory.allocator import BlockStore, FREE

_GLYPHS = string.digits[1:] + string.ascii_uppercase + string.ascii_lowercase

def glyph(owner: int) -> str:
    if owner == FREE:
        return '.'
    return _GLYPHS[(owner-1) % len(_GLYPHS)]

def render_map(store: BlockStore, width: int=64) -> str:
    """One character per block, wrapped every `width` blocks."""
    cap=store.capacity
    lines=[]
    for row in range(0, cap, width):
        lines.append(''.join(glyph(t) for t in store.tags[row:row+width]))
    return '\n'.join(lines)
