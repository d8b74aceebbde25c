"""Test module for CSS color sampling"""

import pytest

from html2pptx.mapping.color import ColorSampler, PillowColorSampler


@pytest.fixture
def sampler():
    return PillowColorSampler()


def test_sample_named_and_hex(sampler):
    assert sampler.sample("red") == (255, 0, 0, 255)
    assert sampler.sample("#00ff00") == (0, 255, 0, 255)
    assert sampler.sample("#00F") == (0, 0, 255, 255)


def test_sample_hex_with_alpha(sampler):
    assert sampler.sample("#00ff0080") == (0, 255, 0, 128)


def test_sample_rgb_functions(sampler):
    assert sampler.sample("rgb(10, 20, 30)") == (10, 20, 30, 255)
    assert sampler.sample("rgba(255, 0, 0, 0.5)") == (255, 0, 0, 128)
    assert sampler.sample("rgb(255 0 0 / 25%)") == (255, 0, 0, 64)
    assert sampler.sample("rgba(0, 0, 0, 0)") == (0, 0, 0, 0)


def test_sample_hsl(sampler):
    assert sampler.sample("hsl(0, 100%, 50%)") == (255, 0, 0, 255)


def test_sample_transparent(sampler):
    assert sampler.sample("transparent") == (0, 0, 0, 0)


@pytest.mark.parametrize("value", [None, "", "none", "not-a-color", "rgb(1, 2)"])
def test_sample_unparsable(sampler, value):
    assert sampler.sample(value) is None


def test_base_sampler_is_abstract():
    with pytest.raises(NotImplementedError):
        ColorSampler().sample("red")
