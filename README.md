# sumikko

Up to three little desktop pets that stroll along the bottom of the screen,
blink, crouch now and then, and climb on top of each other when they get
close enough.

## Installation

```
pip install .
```

The window uses tkinter, which ships with most Python installations. Some
Linux distributions package it separately, for example as `python3-tk`.

## Sprite images

The package does not include any images. You have to supply a directory of
PNG files with these names:

| Pet    | Eyes                   | Body                           |
|--------|------------------------|--------------------------------|
| first  | `e0.png` to `e3.png`   | `w0.png` to `w4.png`           |
| second | `ke0.png` to `ke3.png` | `k0.png` to `k4.png`           |
| third  | `ge0.png` to `ge3.png` | `g0.png` to `g4.png`           |

Body frames 0 to 2 form the walk cycle. Frame 3 is the crouch and frame 4 is
the pose shown while walking is switched off. The eye frames play forwards and
then back again for each blink. Images larger than 70 pixels are shrunk by a
whole-number factor so that they fit. The eye image is drawn over the body
image.

The default directory is `images` inside the installed `sumikko` package. Pass
`--image-dir` to use another one. If an image is missing, the command prints
an error and exits with status 1.

## Running

```
sumikko --image-dir path/to/images
```

Each run opens one more pet, up to three at a time. When all three slots are
taken, the command prints a notice and exits with status 0. A pet's slot is
freed when its window closes.

Options:

- `--image-dir DIR`: where the sprite images are read from.
- `--state-dir DIR`: where the shared table of running pets is kept. It is
  stored as the file `sumikko.slots`, with a `sumikko.slots.lock` lock file
  next to it. The default is the system temporary directory.

Run `sumikko --help` to see them.

## Using the pets

- Drag a pet with the left mouse button. While you hold it, the pet stops
  walking. When you let go, it walks on.
- Drop a pet close to another one and higher on the screen, and it sits on
  that pet's head. It stays there until you drag it away.
- Right-click a pet to open its menu. The first entry switches walking off
  (停止移动) or back on (可以移动). The second entry, 关闭, closes the pet.

The window has no border and stays on top of other windows. On Windows and
macOS its background is transparent. On other systems the background is the
window's ordinary background colour.

## How the pets find each other

The pets send each other their positions over local sockets. On systems with
Unix domain sockets, these are files named `sumikko-<name>.sock` in the
temporary directory. Elsewhere they are TCP ports on `127.0.0.1`, derived from
the name.

- The first pet listens as `wasabi`.
- The second pet listens as `kome`, and it connects to `wasabi`.
- The third pet connects to `kome`. After a failed attempt, it tries `wasabi`
  instead, and it keeps alternating between the two.

A position is sent as two big-endian signed 32-bit integers, x then y. The
point (-1, -1) means that no position is known.

## Library use

The behaviour can also be used without a window:

- `sumikko.motion.Pet` is the state of one pet. `blink_tick()` and
  `move_tick()` each advance one step and return the file name of the frame
  to show. `press()`, `drag(dx, dy)`, `release()`, `toggle_move()` and
  `perch_on(position, lift)` change the pet's state. `ScreenBounds` describes
  the area the pet walks within.
- `sumikko.stacking.PairStacker` decides whether a pet climbs onto one other
  pet. `sumikko.stacking.MiddleStacker` makes that decision for a pet that
  talks to two others, and also works out which positions to pass on to them
  (`to_a`, `to_c`).
- `sumikko.protocol` provides `Point`, `encode_point`, `decode_point` and
  `PointReader`. `PointReader` collects stream bytes and returns whole points
  as they arrive.
- `sumikko.link.PositionServer` and `sumikko.link.PositionClient` exchange
  positions over the local sockets. `address_for(name)` gives the address
  used for a name.
- `sumikko.instances.SlotRegistry` hands out slots through a lock-guarded
  file. `acquire()` takes a slot and `release(slot_id)` frees it. `claim()`
  holds a slot for the length of a `with` block. When every slot is taken,
  it raises `NoFreeSlot`.
- `sumikko.frames.sprite_set(instance_id)` lists the image file names for
  one pet.

## Tests

```
pip install ".[test]"
pytest
```