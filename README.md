# livebg

Building blocks for animated wallpapers. The package is pure Python and has no
third-party dependencies. It computes palettes, frames, geometry and shader
parameters. Putting them on screen is the job of your own renderer.

## Modules

- `livebg.image`: the palettised image model.
  - `Image` has `width`, `height`, `bpp`, a 256-entry `palette`, `ranges` and `pixels`.
  - `Color` is an RGB entry.
  - `ColorRange` has `low`, `high`, `cmode`, `rate` and `size`.
  - `CycleMode` lists the cycling modes.
  - `gen_test_image()` builds a 640x480 checkerboard test image. One range cycles the whole palette.
- `livebg.lbm`: reads IFF ILBM and PBM (`.lbm`) images, including their `CRNG` cycling ranges.
  - `file_is_lbm(fp)` checks a binary stream and rewinds it.
  - `load_image_lbm(fp)` returns an `Image`.
  - Malformed input raises `LbmError`, a `ValueError`.
- `livebg.canvas`: reads images in the canvascycle script format.
  - `parse_canvas(text)` parses a string. Malformed input raises `CanvasFormatError`, a `ValueError`.
  - `load_image(path)` loads a file in either format. It loads LBM files when it recognises them and otherwise parses the file as a script.
- `livebg.cycler`: colour cycling playback.
  - `cycle_offset(mode, rate, rsize, msec)` gives the offset into a range in 24.8 fixed point.
  - `ColorCycler(path=None, *, blend=True, fade_dur=600, show_time=15000, loader=load_image)` animates the palette.
    - With no path it shows the test image.
    - With a file path it loads that file.
    - With a directory path it plays the directory's entries as a slideshow. The slideshow fades out and in between images.
  - `load_slideshow(path)` and `Slideshow.next_image()` handle such directories. Entries that fail to load are skipped.
- `livebg.noise`: hash-based 2D value noise. It provides `noise2`, `lin_inter`, `smooth_inter`, `noise2d` and `perlin2d`.
- `livebg.distort`: a wavy texture-coordinate mesh.
  - `distortion_mesh(t, freq, ampl, mask=None)` builds it from the helpers `wave` and `dmask`.
  - The optional mask is any object with `width`, `height` and `pixels`. It scales the displacement.
- `livebg.stars`: a starfield that streams towards the viewer.
  - `make_stars(count, rng)` scatters the stars.
  - `Starfield.quads(tmsec)` returns the streak quads and the glow quads.
  - `Starfield.follow(...)` eases the camera towards the mouse.
  - `perspective(...)` builds a column-major projection matrix.
- `livebg.ripple`: state for a water ripple effect.
  - `RippleState.update(time_msec, mouse_pos)` returns where raindrops and mouse splashes land. It also swaps the ping-pong buffer indices.
  - `RippleState` also provides `resize`, `plonk_quad`, `texture_size` and `blur_delta`.
  - `blob_texture(size)` builds the splash stamp.
- `livebg.video`:
  - `FrameRing` is a bounded, thread-safe frame queue. A producer calls `put`, and a renderer calls `take(dt_msec, interval_usec)` at the frame rate.
  - `static_frame(size, rng)` generates TV-style noise.
  - `next_pow2(x)` sizes textures.
- `livebg.ps3`: the flowing wave surface.
  - `wave_grid(w, l)` builds its vertex grid and quad indices.
  - `WaveSettings.uniforms(tmsec, w, l)` gives the shader uniform values.
  - `perspective(...)` builds a projection matrix.

## Example: colour cycling

```python
from livebg.cycler import ColorCycler

cycler = ColorCycler("scene.lbm")   # or ColorCycler() for the test image
for t in range(0, 2000, 50):
    cycler.draw(t)
    # cycler.palette: the 256 current Color values
    # cycler.pixels: the palette indices of the frame (cycler.width x cycler.height)
    # cycler.palette_dirty / cycler.frame_dirty: set when something changed
```

## Example: reading an LBM file directly

```python
from livebg.lbm import file_is_lbm, load_image_lbm

with open("scene.lbm", "rb") as fp:
    if file_is_lbm(fp):
        image = load_image_lbm(fp)
        print(image.width, image.height, len(image.ranges))
```

## What this package does not do

- It does not open windows or draw anything. There is no OpenGL, X11 or window-system code.
- It has no shader programs. The ripple waves and the ps3 wave are propagated and lit by shaders that you supply. The package only provides their inputs.
- It does not decode video files. `FrameRing` carries frames that your own decoder produces.
- It has no command-line program and no configuration storage. Settings are plain constructor arguments.

## Installation

```
pip install .
```

## Running the tests

```
pip install .[test]
pytest
```