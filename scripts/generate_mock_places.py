import pandas as pd
import numpy as np

from places.store import PlaceStore
from routing.geofence import offset_m
from routing.models import Coordinate


def generate_mock_trail(num_fixes=200, output_file="mock_trail.csv", step_m=15.0, jitter_m=8.0, seed=None):
    """
    Generates a GPS trail that walks roughly north-east with realistic jitter.
    Most consecutive fixes are closer than the 50 m re-center threshold, so the
    map should only follow every few fixes when the trail is replayed.
    """
    # Start near the centre of Moscow (where the seeded restaurants are geocoded)
    START = Coordinate(55.751244, 37.618423)
    rng = np.random.default_rng(seed)

    # 1. Walk: constant heading with small heading noise
    headings = np.radians(45 + rng.normal(0, 20, size=num_fixes))
    north = np.cumsum(step_m * np.cos(headings))
    east = np.cumsum(step_m * np.sin(headings))

    # 2. GPS jitter on top of the walk
    north += rng.normal(0, jitter_m, size=num_fixes)
    east += rng.normal(0, jitter_m, size=num_fixes)

    data = []
    for index in range(num_fixes):
        fix = offset_m(START, float(north[index]), float(east[index]))
        data.append({
            "fix_index": index,
            "lat": np.round(fix.latitude, 6),
            "lon": np.round(fix.longitude, 6),
        })

    # 3. Save to CSV
    df = pd.DataFrame(data)
    df.to_csv(output_file, index=False)
    print(f"✅ Generated {num_fixes} fixes and saved to '{output_file}'")
    return df


def seed_place_store(path="places.csv"):
    store = PlaceStore(path)
    written = store.seed()
    if written:
        print(f"Seeded {written} places into '{path}'.")
    else:
        print(f"'{path}' already has places, nothing seeded.")


if __name__ == "__main__":
    seed_place_store()
    generate_mock_trail()
