# Balancer: spread tracks across sides of (nearly) equal length
# Package: src.balancer

__version__ = "1.0.0"
__author__ = "Balancer Contributors"
__description__ = "Balance album tracks across tape, vinyl or disc sides"

# Module structure:
#   - balancer.model    : Track, Side, Album + structural hash
#   - balancer.balance  : Side sizing, LPT engine, shuffle search, comparison
#   - balancer.load     : Track-list reader, audio directory scanner
#   - balancer.render   : Text, plain-seconds and record output
#   - balancer.config   : Configuration management
#   - balancer.cli      : Command-line interface
