"""Numeric constants shared by the math, curve and pool layers.

All fixed-point values are integers scaled by 10^18.
"""

# Fixed-point scale (1.0)
ONE_18 = 10**18
SCALE = ONE_18

# Signed and unsigned 256-bit bounds, the representable range of a fixed-point value
INT256_MIN = -(2**255)
INT256_MAX = 2**255 - 1
UINT256_MAX = 2**256 - 1

# sqrt(pi) = 1.772453850905516027298...
SQRT_PI = 1_772_453_850_905_516_027

# sqrt(2 * pi) = 2.506628274631000502415...
SQRT_2PI = 2_506_628_274_631_000_502

# ln(2) = 0.693147180559945309417...
LN2 = 693_147_180_559_945_309

# Beyond 10 standard deviations exp(-z^2 / 2) < 2e-22, below fixed-point resolution
MAX_STANDARD_SCORE = 10 * ONE_18

# Trade fee as a fraction of the L2 distance moved (1%)
DEFAULT_FEE_RATE = 10**16

# Relative tolerance when matching a curve's L2 norm against the pool bound (0.1%)
DEFAULT_L2_TOLERANCE = 10**15

# Share supply minted to the initializer
INITIAL_SHARES = ONE_18
