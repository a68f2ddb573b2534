import logging
from novelty.ns_trainer import run_maze_experiment

logging.basicConfig(level=logging.INFO)

# short run on the medium maze; behaviors are final robot positions
result = run_maze_experiment('medium', generations=20, population_size=50, log_interval=5)

print("Archive behaviors (final positions):")
for x, y in result.archive[:10]:
    print(f"  Position: ({x:.2f}, {y:.2f})")
if len(result.archive) > 10:
    print(f"  ... and {len(result.archive) - 10} more")
print(result.history.tail())
