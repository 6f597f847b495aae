"""Machine-wide CHIP-8 constants."""

MEMORY_SIZE = 4096                      # 4KB RAM
PROGRAM_START = 0x200                   # Programs load at 0x200
MAX_ROM_SIZE = MEMORY_SIZE - PROGRAM_START

DISPLAY_W, DISPLAY_H = 64, 32           # CHIP-8 native resolution

STACK_SIZE = 16                         # 16-level stack
NUM_REGISTERS = 16                      # V0-VF
FLAG_REGISTER = 0xF                     # VF doubles as carry/borrow/collision
NUM_KEYS = 16                           # 16 hex keys

FONT_START = 0x000                      # Default font base address
FONT_GLYPH_SIZE = 5                     # Bytes per 4x5 glyph

# CPU Timing
DEFAULT_CLOCK_HZ = 500                  # Instructions per second
TIMER_HZ = 60                           # Delay/Sound timer rate
DEFAULT_CYCLES_PER_FRAME = DEFAULT_CLOCK_HZ // TIMER_HZ
