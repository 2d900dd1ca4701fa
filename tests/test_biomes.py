"""Tests for biome color classification."""

import numpy as np
import pytest
from terrain_map.core.alea_prng import AleaPRNG
from terrain_map.core.biomes import (
    BANDS,
    GRASS_COLORS,
    BandKind,
    BiomeColorClassifier,
    BiomeOptions,
    ChannelRange,
    find_band,
    wrap_channel,
)
from terrain_map.core.color_field import height_bytes
from terrain_map.core.height_field import HeightField
from terrain_map.core.heightmap_generator import HeightmapConfig, HeightmapGenerator
from terrain_map.errors import ConfigurationError

NOISE = 19  # fractal_rand() stays within (-20, 20)


class TestBandTable:
    """Test band lookup and channel ranges."""

    def test_every_height_byte_in_exactly_one_band(self):
        for h in range(256):
            assert sum(band.contains(h) for band in BANDS) == 1

    def test_bands_are_ordered_and_contiguous(self):
        for lower, upper in zip(BANDS, BANDS[1:]):
            assert lower.high == upper.low
        assert BANDS[0].low == 0
        assert BANDS[-1].high == 256

    @pytest.mark.parametrize(
        "h,name",
        [(0, "dark_grass"), (49, "dark_grass"), (50, "light_grass"), (99, "yellow_grass"),
         (100, "dirt"), (149, "dark_dirt"), (174, "light_dirt"), (175, "rock"),
         (224, "rock"), (225, "snow"), (255, "snow")],
    )
    def test_band_boundaries_half_open(self, h, name):
        assert find_band(h).name == name

    def test_out_of_range_height(self):
        with pytest.raises(ValueError):
            find_band(256)

    def test_constant_channel_draws_nothing(self):
        prng = AleaPRNG("constant")

        assert ChannelRange(20).sample(prng) == 20
        assert prng.call_count == 0

    def test_channel_samples_within_bounds(self):
        prng = AleaPRNG("bounds")
        for band in BANDS:
            for channel in (band.red, band.green, band.blue, band.gray):
                if channel is None:
                    continue
                low, high = channel.bounds
                for _ in range(200):
                    assert low <= channel.sample(prng) <= high

    def test_descending_channel_bounds(self):
        assert ChannelRange(192, 65, -1).bounds == (128, 192)
        assert ChannelRange(128, 98).bounds == (128, 225)


class TestWrapChannel:
    """Test truncated modulo wrapping."""

    @pytest.mark.parametrize(
        "value,expected",
        [(0, 0), (15, 15), (-15, 15), (254, 254), (255, 0), (270, 15), (-270, 15), (-255, 0)],
    )
    def test_wrap_values(self, value, expected):
        assert wrap_channel(value) == expected

    def test_wrap_law(self):
        for value in range(-300, 600):
            assert 0 <= wrap_channel(value) <= 255


class TestBiomeColorClassifier:
    """Test per-texel coloring."""

    @pytest.fixture
    def classifier(self):
        return BiomeColorClassifier()

    @pytest.fixture
    def height_field(self):
        generator = HeightmapGenerator(HeightmapConfig(edge_size=4, roughness=0.7))
        return generator.generate(AleaPRNG("biome_test"))

    def test_fractal_rand_range(self, classifier):
        prng = AleaPRNG("fractal")
        values = [classifier.fractal_rand(prng) for _ in range(2000)]

        assert min(values) >= -NOISE
        assert max(values) <= NOISE
        assert min(values) < 0 < max(values)

    @pytest.mark.parametrize("h", [0, 1, 4])
    def test_lowest_ground_is_grass(self, classifier, h):
        prng = AleaPRNG(f"grass-{h}")
        colors = {classifier.base_color(h, prng) for _ in range(300)}

        assert colors == set(GRASS_COLORS)

    def test_h49_stays_in_dark_grass_band(self, classifier):
        prng = AleaPRNG("dark-grass")
        for _ in range(300):
            r, g, b = classifier.base_color(49, prng)
            assert 0 <= r <= NOISE
            assert 128 - NOISE <= g <= 192 + NOISE
            assert 0 <= b <= NOISE

    def test_h5_uses_band_table(self, classifier):
        """The grass threshold is exclusive."""
        prng = AleaPRNG("threshold")
        colors = {classifier.base_color(5, prng) for _ in range(50)}

        assert not colors <= set(GRASS_COLORS)

    @pytest.mark.parametrize("h", [225, 240, 255])
    def test_snow_is_unperturbed(self, classifier, h):
        prng = AleaPRNG("snow")

        assert classifier.base_color(h, prng) == (h, h, h)
        assert prng.call_count == 0

    def test_snow_texel_keeps_gray(self, classifier):
        prng = AleaPRNG("snow-texel")
        for _ in range(100):
            r, g, b = classifier.texel_color(225, prng)
            assert r == g == b
            # The shared noise adds at most 255 / 20
            assert 224 <= r <= 238

    @pytest.mark.parametrize("h", [175, 200, 224])
    def test_rock_band_shares_one_gray(self, classifier, h):
        prng = AleaPRNG(f"rock-{h}")
        for _ in range(200):
            r, g, b = classifier.base_color(h, prng)
            assert r == g == b
            assert 128 - NOISE <= r <= 225 + NOISE

    def test_rock_band_draws(self, classifier):
        """Gray base, coin flip and magnitude: three draws."""
        prng = AleaPRNG("rock-draws")
        classifier.base_color(200, prng)

        assert prng.call_count == 3

    def test_channel_band_perturbs_independently(self, classifier):
        prng = AleaPRNG("light-dirt")
        colors = [classifier.base_color(160, prng) for _ in range(200)]

        assert any(len({r, g, b}) > 1 for r, g, b in colors)
        for r, g, b in colors:
            assert 140 - NOISE <= r <= 180 + NOISE
            assert 100 - NOISE <= g <= 120 + NOISE
            assert 20 - NOISE <= b <= 60 + NOISE

    def test_low_channels_wrap_instead_of_clamp(self, classifier):
        """A zero channel perturbed downwards wraps to its absolute value."""
        prng = AleaPRNG("wrap")
        reds = {classifier.base_color(20, prng)[0] for _ in range(500)}

        assert reds <= set(range(0, NOISE + 1))
        assert len(reds) > 5

    def test_custom_options(self):
        classifier = BiomeColorClassifier(BiomeOptions(grass_threshold=60))
        prng = AleaPRNG("options")

        assert classifier.base_color(55, prng) in GRASS_COLORS

    def test_classify_shape(self, classifier, height_field):
        colors = classifier.classify(height_field, 16, 12, AleaPRNG("shape"))

        assert (colors.width, colors.height) == (16, 12)
        assert colors.pixels.shape == (12, 16, 3)
        assert colors.pixels.dtype == np.uint8

    def test_classify_deterministic(self, classifier, height_field):
        a = classifier.classify(height_field, 16, 16, AleaPRNG("same"))
        b = classifier.classify(height_field, 16, 16, AleaPRNG("same"))

        assert np.array_equal(a.pixels, b.pixels)

    def test_classify_twice_with_continuing_prng(self, classifier, height_field):
        """No first-call special casing: a continuing stream gives new colors."""
        prng = AleaPRNG("continue")
        first = classifier.classify(height_field, 16, 16, prng)
        second = classifier.classify(height_field, 16, 16, prng)

        assert first is not second
        assert not np.array_equal(first.pixels, second.pixels)

    def test_classify_does_not_touch_height_field(self, classifier, height_field):
        before = height_field.values.copy()
        classifier.classify(height_field, 16, 16, AleaPRNG("pure"))

        assert np.array_equal(height_field.values, before)

    def test_flat_low_field_is_all_grass(self, classifier):
        field = HeightField(2)
        colors = classifier.classify(field, 5, 5, AleaPRNG("meadow"))

        for x in range(5):
            for z in range(5):
                pixel = colors.get_color(x, z)
                assert any(
                    all(base - 1 <= channel <= base + 13 for channel, base in zip(pixel, grass))
                    for grass in GRASS_COLORS
                )

    def test_flat_high_field_is_snow(self, classifier):
        field = HeightField(2, values=np.ones(25))
        colors = classifier.classify(field, 5, 5, AleaPRNG("peak"))

        assert np.all(colors.pixels == 255)

    @pytest.mark.parametrize("width,height", [(16, 16), (16, 12), (40, 7)])
    def test_classify_matches_texel_color(self, classifier, height_field, width, height):
        """Batched coloring equals texel_color() applied column by column."""
        heights = height_bytes(height_field, width, height)
        reference_prng = AleaPRNG("per_texel")
        expected = np.zeros((height, width, 3), dtype=np.uint8)
        for x in range(width):
            for z in range(height):
                expected[z, x] = classifier.texel_color(int(heights[z, x]), reference_prng)

        prng = AleaPRNG("per_texel")
        colors = classifier.classify(height_field, width, height, prng)

        assert np.array_equal(colors.pixels, expected)
        assert prng.call_count == reference_prng.call_count

    def test_classify_covers_every_band(self, classifier):
        """A ramp through all height bytes, including the grass palette."""
        field = HeightField(8, values=np.tile(np.linspace(0.0, 1.0, 257), 257))
        heights = height_bytes(field, 256, 4)
        reference_prng = AleaPRNG("ramp")
        expected = np.zeros((4, 256, 3), dtype=np.uint8)
        for x in range(256):
            for z in range(4):
                expected[z, x] = classifier.texel_color(int(heights[z, x]), reference_prng)

        prng = AleaPRNG("ramp")
        colors = classifier.classify(field, 256, 4, prng)

        assert {find_band(int(h)).name for h in heights.ravel()} == {band.name for band in BANDS}
        assert np.array_equal(colors.pixels, expected)
        assert prng.call_count == reference_prng.call_count

    def test_draw_count(self, classifier):
        counts = {band.name: classifier.draw_count(band) for band in BANDS}

        # dark grass: one green jitter, three fractal pairs, one smoothing draw
        assert counts["dark_grass"] == 1 + 6 + 1
        assert counts["dark_dirt"] == 2 + 6 + 1
        assert counts["rock"] == 1 + 2 + 1
        assert counts["snow"] == 1

    @pytest.mark.parametrize("width,height", [(0, 4), (4, -2)])
    def test_invalid_texture_size(self, classifier, height_field, width, height):
        with pytest.raises(ConfigurationError):
            classifier.classify(height_field, width, height, AleaPRNG("bad"))

    def test_band_kinds(self):
        kinds = [band.kind for band in BANDS]

        assert kinds.count(BandKind.GRAY) == 1
        assert kinds[-1] is BandKind.SNOW
