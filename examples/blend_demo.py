"""
Example demonstrating region-tree classification and chunk blending.
"""

import numpy as np
import matplotlib.pyplot as plt
from py_orbis.config import load_preset
from py_orbis.core import BiomeBlender, LegacyClassifier, RegionResolver


def main():
    # Configuration
    seed = 235623651371436421
    chunk_width = 16
    chunks = 24  # Chunks per side of the rendered area

    dimension, registry = load_preset("orbis_demo")
    resolver = RegionResolver(dimension, registry)
    blender = BiomeBlender(frequency=0.04, min_blend_radius=32.0, chunk_width=chunk_width)

    print(f"Blend radius: {blender.blend_radius:.1f}")
    print("Blending chunks...")

    chains = blender.blend_area(seed, 0, 0, chunks, chunks, resolver)

    size = chunks * chunk_width
    raw = np.zeros((size, size, 3))
    blended = np.zeros((size, size, 3))
    biome_counts = {}

    for (origin_x, origin_z), head in chains.items():
        rgb = head.blend(lambda biome_id: registry.biome_by_id(biome_id).color)
        for index in range(chunk_width * chunk_width):
            zi, xi = divmod(index, chunk_width)
            x, z = origin_x + xi, origin_z + zi
            biome = resolver.classify_biome(x, z)
            raw[z, x] = biome.color
            blended[z, x] = rgb[index]
            biome_counts[biome.name] = biome_counts.get(biome.name, 0) + 1

    for name, count in sorted(biome_counts.items(), key=lambda item: -item[1]):
        print(f"  {name:>14}: {100.0 * count / size ** 2:5.1f}%")

    # Legacy classifier over the same area for comparison
    legacy = LegacyClassifier()
    legacy_rgb = np.zeros((size, size, 3))
    for z in range(size):
        for x in range(size):
            legacy_rgb[z, x] = legacy.classify_biome(x, z).color

    # Visualize results
    fig, axes = plt.subplots(1, 3, figsize=(15, 5))

    for ax, image, title in zip(
        axes,
        [legacy_rgb, raw, blended],
        ["Legacy classifier", "Region tree", "Region tree, blended"],
    ):
        ax.imshow(image / 255.0, origin="lower")
        ax.set_title(title)
        ax.set_xlabel("x")
        ax.set_ylabel("z")

    plt.tight_layout()
    plt.savefig("blend_demo.png", dpi=150)
    print("Saved blend_demo.png")


if __name__ == "__main__":
    main()
