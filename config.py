# Terrain generation defaults.
DEFAULT_LEN = 64 # edge length of the map cube
DEFAULT_FREQUENCY = 0.05
DEFAULT_LAYER_HEIGHT = 15 # max soil depth for the stratified generator
DEFAULT_MIN_SOIL_CUTOFF = 45
DEFAULT_MAX_WATER_LEVEL = 40

# Smallest map the testing generator will build.
TESTING_MIN_DIM = 6

# Fractal noise settings shared by the height and layer fields.
# Values of 0.05 and below are recommended for the frequency. At 0.001 terrain
# will be mostly gentle slopes; at 0.005 there will be significant hills; at
# 0.05 the terrain will feature a lot of mountain peaks.
NOISE_OCTAVES = 6
NOISE_LACUNARITY = 2.0
NOISE_PERSISTENCE = 0.5

# Rendering
DEFAULT_TILE_WIDTH = 24
DEFAULT_TILE_HEIGHT = 26
BACKGROUND_COLOR = (154, 216, 224)
OUTPUT_PATH = 'out.bmp'

# Flat tile colors used when no sprite sheet is supplied.
ROCK_COLOR = [128, 128, 132]
GRASS_COLOR = [77, 180, 44]
SOIL_COLOR = [134, 96, 67]
WATER_COLOR = [40, 90, 128]
# Left and right faces are drawn darker than the top.
SIDE_SHADE_LEFT = 0.75
SIDE_SHADE_RIGHT = 0.55

# Enable ANSI colors in logs.
LOG_COLOR = True

# Per-scope log switches (warnings and errors always print).
LOG_MAPGEN = True
LOG_ATLAS = True
LOG_RENDER = True

# Print DEBUG level lines.
LOG_DEBUG = False
