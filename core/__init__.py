"""
Core cartridge host.

Modules:
    errors     - cartridge error taxonomy
    cartridge  - optional Cartridge base class and registry record
    spectrum   - spectrum sanitization
    registry   - CartridgeRegistry (admission, state, per-frame draw)
    discovery  - pkgutil-based cartridge discovery
    display    - DisplayManager (pygame window)
    loop       - EventLoop (events + frame timing)
    app        - SoundBackgrounds application

Import submodules directly (e.g. ``from core.registry import CartridgeRegistry``);
security.validator depends on core.errors, so this package stays import-light.
"""
