import csv

import numpy as np

ACCESSIBILITY_FEATURES = [
    "wheelchair_ramp",
    "wheelchair_lift",
    "voice_guidance",
    "sign_language_support",
    "hearing_loop",
    "service_animal_friendly",
]
LANGUAGES = ["en", "es", "ar", "zh", "asl"]
VEHICLES = [("Toyota", "Sienna"), ("Honda", "Odyssey"), ("Ford", "Transit"), ("Chrysler", "Pacifica")]
COLORS = ["White", "Silver", "Black", "Blue", "Gray"]

COLUMNS = [
    "driver_id", "name", "phone", "lat", "lon", "rating", "total_rides", "is_available",
    "make", "model", "year", "color", "plate_number", "accessibility_features", "languages",
]


def generate_mock_drivers(filename="mock_drivers_100.csv", count=100, seed=None):
    # Scatter drivers around lower Manhattan, roughly +/- 8km.
    base_lat = 40.7128
    base_lon = -74.0060
    rng = np.random.default_rng(seed)

    with open(filename, mode="w", newline="") as file:
        writer = csv.writer(file)
        writer.writerow(COLUMNS)

        for i in range(count):
            lat = base_lat + rng.uniform(-0.075, 0.075)
            lon = base_lon + rng.uniform(-0.075, 0.075)

            # Every vehicle carries one to three features.
            n_features = int(rng.integers(1, 4))
            features = rng.choice(ACCESSIBILITY_FEATURES, size=n_features, replace=False)
            languages = rng.choice(LANGUAGES, size=int(rng.integers(1, 3)), replace=False)
            make, model = VEHICLES[int(rng.integers(len(VEHICLES)))]

            writer.writerow([
                f"driver_{i + 1}",
                f"Driver {i + 1}",
                f"+1-555-{i + 1:04d}",
                round(lat, 6),
                round(lon, 6),
                round(float(rng.uniform(3.5, 5.0)), 1),
                int(rng.integers(0, 2000)),
                # 80% of the fleet starts available
                "true" if rng.random() < 0.8 else "false",
                make,
                model,
                int(rng.integers(2016, 2025)),
                COLORS[int(rng.integers(len(COLORS)))],
                f"ACC{i + 1:04d}",
                ";".join(sorted(features)),
                ";".join(sorted(languages)),
            ])

    print(f"Successfully generated {count} mock drivers into '{filename}'.")
    return filename


if __name__ == "__main__":
    generate_mock_drivers()
