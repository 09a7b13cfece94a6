"""Frequency bars with a colour ramp and slowly falling peak markers."""

from core.cartridge import Cartridge

BAR_COUNT = 48
PEAK_DECAY = 2.5
PEAK_HEIGHT = 3


class SpectrumBars(Cartridge):
    name = "Spectrum Bars"
    version = "1.0.0"
    author = "SoundBackgrounds"
    description = "Classic analyzer bars with peak hold"

    def setup(self, ctx):
        return {"peaks": [0.0] * BAR_COUNT}

    def draw(self, ctx, spectrum, width, height, state):
        n = len(spectrum)
        if n == 0 or width <= 0 or height <= 0:
            return None

        peaks = list(state.get("peaks", ()))
        if len(peaks) != BAR_COUNT:
            peaks = [0.0] * BAR_COUNT

        bar_w = width / BAR_COUNT
        low = ctx.color(20, 120, 255)
        high = ctx.color(255, 60, 120)
        ctx.no_stroke()

        for i in range(BAR_COUNT):
            start = i * n // BAR_COUNT
            end = max(start + 1, (i + 1) * n // BAR_COUNT)
            level = float(max(spectrum[start:end]))
            bar_h = ctx.map(level, 0, 255, 0, height * 0.9)
            x = i * bar_w + 1
            w = max(bar_w - 2, 1)

            ctx.fill(ctx.lerp_color(low, high, level / 255))
            ctx.rect(x, height - bar_h, w, bar_h)

            peaks[i] = max(bar_h, peaks[i] - PEAK_DECAY)
            ctx.fill(255, 255, 255, 200)
            ctx.rect(x, height - peaks[i] - PEAK_HEIGHT, w, PEAK_HEIGHT)

        return {"peaks": peaks}
