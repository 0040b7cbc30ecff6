from __future__ import annotations

import base64
import colorsys
import io
from dataclasses import dataclass

from .animation import Phase
from .board import PEGS, Disk
from .game import GameSnapshot


@dataclass(frozen=True, slots=True)
class StateImage:
    mime_type: str
    data_base64: str
    data_url: str
    width: int
    height: int

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.data_base64)


def _disk_color(disk: Disk, n_disks: int) -> tuple[int, int, int]:
    ratio = (disk - 1) / (n_disks - 1) if n_disks > 1 else 1
    hue = 0.6 - 0.55 * ratio
    r, g, b = colorsys.hls_to_rgb(hue, 0.55, 0.65)
    return (int(r * 255), int(g * 255), int(b * 255))


def render_game_image(
    snapshot: GameSnapshot,
    *,
    size: tuple[int, int] = (640, 360),
    label_pegs: bool = True,
    background: str = "white",
) -> StateImage:
    """Draw one animation frame of the game as a PNG.

    Lifted disks are drawn above their source peg, Transiting disks above
    the target peg, and the selected disk gets a highlighted outline.
    """

    try:
        from PIL import Image, ImageDraw, ImageFont
    except ImportError as exc:  # pragma: no cover
        raise RuntimeError(
            "Missing pillow. Install with: pip install 'hanoi-trial[viz]'"
        ) from exc

    width, height = size
    img = Image.new("RGB", (width, height), background)
    draw = ImageDraw.Draw(img)
    font = ImageFont.load_default()

    n_disks = max(snapshot.board.n_disks, 1)
    margin_x = max(50, width // 8)
    peg_y_top = int(height * 0.3)
    peg_y_bottom = int(height * 0.82)
    hover_y = int(height * 0.2)
    peg_x = [
        int(margin_x + i * (width - 2 * margin_x) / (len(PEGS) - 1))
        for i in range(len(PEGS))
    ]

    if label_pegs:
        for peg, x in zip(PEGS, peg_x):
            label = f"Peg {peg.value}"
            try:
                bbox = draw.textbbox((0, 0), label, font=font)
                label_w = bbox[2] - bbox[0]
            except Exception:
                label_w = 0
            draw.text(
                (x - label_w / 2, int(height * 0.04)), label, fill="black", font=font
            )

    disk_h = max(8, min(int(height * 0.05), (peg_y_bottom - peg_y_top) // (n_disks + 1) - 4))
    min_w = max(30, int(width * 0.06))
    max_w = max(60, int(width * 0.26))
    base_height = max(10, int(height * 0.03))
    base_top = min(height - base_height - 6, peg_y_bottom + 6)
    draw.rectangle(
        [margin_x - 30, base_top, width - margin_x + 30, base_top + base_height],
        fill="#1f2937",
    )

    def disk_box(disk: Disk, x: int, y_bottom: int) -> list[float]:
        ratio = (disk - 1) / (n_disks - 1) if n_disks > 1 else 1
        w = min_w + ratio * (max_w - min_w)
        return [x - w / 2, y_bottom - disk_h, x + w / 2, y_bottom]

    hovering = snapshot.phase in (Phase.LIFTED, Phase.TRANSITING)
    for i, peg in enumerate(PEGS):
        x = peg_x[i]
        draw.line((x, peg_y_top, x, peg_y_bottom), fill="#6b7280", width=4)
        stack = list(snapshot.board.stack(peg))
        if hovering and peg == snapshot.selected_peg and stack:
            stack.pop()
        for j, disk in enumerate(stack):
            y_bottom = peg_y_bottom - j * (disk_h + 4)
            highlight = (
                snapshot.phase is Phase.SETTLING
                and peg == snapshot.target_peg
                and j == len(stack) - 1
            )
            draw.rectangle(
                disk_box(disk, x, y_bottom),
                fill=_disk_color(disk, n_disks),
                outline="#f59e0b" if highlight else "#111827",
                width=3 if highlight else 1,
            )

    if hovering and snapshot.selected_disk is not None:
        over = snapshot.target_peg if snapshot.phase is Phase.TRANSITING else snapshot.selected_peg
        if over is not None:
            draw.rectangle(
                disk_box(snapshot.selected_disk, peg_x[PEGS.index(over)], hover_y),
                fill=_disk_color(snapshot.selected_disk, n_disks),
                outline="#f59e0b",
                width=3,
            )

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    b64 = base64.b64encode(buffer.getvalue()).decode("ascii")
    return StateImage(
        mime_type="image/png",
        data_base64=b64,
        data_url=f"data:image/png;base64,{b64}",
        width=width,
        height=height,
    )
