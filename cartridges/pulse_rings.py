"""Concentric rings that swell with bass energy."""

import math

name = "Pulse Rings"
version = "1.0.0"
author = "SoundBackgrounds"
description = "Rings pulsing around the centre"

RINGS = 6
ENERGY_DECAY = 0.92


def setup(ctx):
    return {"phase": 0.0, "energy": 0.0}


def draw(ctx, spectrum, width, height, state):
    n = len(spectrum)
    bass_bins = max(1, n // 16)
    bass = float(sum(spectrum[:bass_bins])) / bass_bins / 255.0 if n else 0.0

    energy = max(bass, state.get("energy", 0.0) * ENERGY_DECAY)
    phase = (state.get("phase", 0.0) + 0.02 + energy * 0.1) % (2 * math.pi)

    cx, cy = width / 2, height / 2
    base = min(width, height) * 0.07

    ctx.no_fill()
    for i in range(RINGS):
        t = i / RINGS
        radius = base * (i + 1) * (1 + 0.35 * energy * math.sin(phase + t * math.pi))
        ctx.stroke(ctx.lerp_color((40, 200, 255), (255, 80, 200), t))
        ctx.stroke_weight(1 + 4 * energy * (1 - t))
        ctx.ellipse(cx, cy, radius * 2, radius * 2)

    return {"phase": phase, "energy": energy}
