# constants.py
"""
Application-level constants.

These values are static and do not change between runs. They are
fundamental to the application's framework, such as the glyph alphabet,
terminal control sequences, default grid dimensions and the decorative
asset printed under the steam. Experimental values live in config.json.
"""

# --- Grid defaults ---
# Width must be odd so the spawn distribution has a true center column.
DEFAULT_WIDTH = 71
DEFAULT_HEIGHT = 8
DEFAULT_SCALE = 4.5

# Driver tick interval in milliseconds.
DEFAULT_TICK_INTERVAL_MS = 100
DEFAULT_LOG_THROTTLE_TICKS = 100

# --- Motion ---
# Particle speed is expressed in grid cells per this many milliseconds.
SPEED_TIME_BASE_MS = 2000.0

# --- Glyph alphabet ---
# Ordered from empty to densest cell.
GLYPH_BLANK = " "
GLYPH_LIGHT = "░"   # light shade
GLYPH_MEDIUM = "▒"  # medium shade
GLYPH_DARK = "▓"    # dark shade
GLYPH_SOLID = "█"   # full block

# --- Terminal ---
# Move the cursor home and clear the screen.
CLEAR_SCREEN = "\033[H\033[2J"

# The coffee cup drawn below the steam. The leading newline separates it
# from the last (source) row of the rendered frame.
CUP = """
                    .:-----====----------------:.
                 .:=-===++--:::-===========+=------:
                ::==+===-==:::::-:.:--:--:::--===----:
               .:++===:..--:::::::::::..--....:-==--+.:
               .=:=+==-::.::::::::::::::-:.....:===-:-=::....:
                :.:--=+==--::::...........:::-==+=-----. .... :.
              :-=   :::---==+++==------==++==---:::..=..:   .: -
          .-=-:.-        .....::--------::.....   ...=.+-:  :: -
        .=-:.....-                                ..=.=..:+-. :.
       -=:.......:-                              ..-::----. :=
      -=........  .-                            ..-:  .  ::-.=-
      -=......      :.                          :-.::::::.....-:
      --:....        .:.                      :-.::.     ....:-:
       ---..           ==:                  :=-          ...:--
        .---.           .-=-::.        .::-=-.          ..:--:
          -==-:.           .::--======--::.            ::-=-
            :-=-=-::.                             .::-=-=-
               ::-=:----::.......     .......::-----=-:.
                   .::::--:::::---------:::::--::::.
                          ...::::::::::::....                        """
