"""
cartridges/
-----------
Bundled visualization cartridges.

All cartridges are automatically discovered by core.discovery and
admitted through CartridgeRegistry. A module provides either a Cartridge
subclass or module-level draw()/setup() functions.

Example cartridge structure:
    from core.cartridge import Cartridge

    class Bars(Cartridge):
        name = "Bars"
        version = "1.0.0"

        def setup(self, ctx):
            return {"frame": 0}

        def draw(self, ctx, spectrum, width, height, state):
            ctx.fill(255)
            ctx.rect(0, height - spectrum[0], width, spectrum[0])
            return {"frame": state["frame"] + 1}

Cartridge source is screened at admission: no eval/exec, imports of
host modules, file access or object-model tricks.
"""
