import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from guild.application.services.seed_policy import build_rng, derive_rng, derive_seed


class SeedPolicyTests(unittest.TestCase):
    def test_seed_is_stable_for_equivalent_contexts(self) -> None:
        first = derive_seed("guild.session", {"seed": 4, "tags": {"b", "a"}})
        second = derive_seed("guild.session", {"tags": {"a", "b"}, "seed": 4})
        self.assertEqual(first, second)

    def test_namespace_changes_seed(self) -> None:
        self.assertNotEqual(derive_seed("guild.session", {"seed": 4}), derive_seed("guild.recruits", {"seed": 4}))

    def test_seed_fits_in_32_bits(self) -> None:
        self.assertLess(derive_seed("guild.session", {"seed": 123456789}), 2**32)

    def test_non_finite_values_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            derive_seed("guild.session", {"rate": float("nan")})

    def test_seeded_rng_is_reproducible(self) -> None:
        self.assertEqual(build_rng(8).random(), derive_rng("guild.session", {"seed": 8}).random())
        self.assertEqual(build_rng(8).randrange(1000), build_rng(8).randrange(1000))


if __name__ == "__main__":
    unittest.main()
