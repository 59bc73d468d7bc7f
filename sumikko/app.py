"""Desktop window for one pet and the command that starts it."""

from __future__ import annotations

import argparse
import math
import sys
import tempfile
from collections.abc import Callable
from pathlib import Path

from sumikko.instances import NoFreeSlot, SlotRegistry
from sumikko.link import PositionClient, PositionServer
from sumikko.motion import SIZE, Pet, ScreenBounds
from sumikko.protocol import ABSENT, Point
from sumikko.stacking import MiddleStacker, PairStacker

MAX_INSTANCES = 3
REGISTRY_NAME = "sumikko.slots"
TITLE = "sumikko"
FULL_MESSAGE = "空啦，最多只有3只哦。"
SERVER_FAILED = "创建服务器失败"
STOP_LABEL = "停止移动"
MOVE_LABEL = "可以移动"
CLOSE_LABEL = "关闭"

FIRST_LINK = "wasabi"
SECOND_LINK = "kome"

BLINK_MS = 30
MOVE_MS = 70
LINK_MS = 10

_KEY_COLOUR = "#ff00ff"


class PetWindow:
    """A borderless, always-on-top window showing and driving one pet."""

    def __init__(self, root, pet: Pet, image_dir) -> None:
        import tkinter as tk
        from tkinter import messagebox

        self.root = root
        self.pet = pet
        self.image_dir = Path(image_dir)
        self._tk = tk
        self._jobs: dict[str, str] = {}
        self._links: list[PositionServer | PositionClient] = []
        self._drag_start = (0, 0)
        self._closed = False

        self._images = {
            name: self._load(name) for name in sorted(pet.sprites.all_files)
        }

        root.title(TITLE)
        root.overrideredirect(True)
        root.attributes("-topmost", True)
        background = self._make_transparent()
        root.geometry(f"{SIZE}x{SIZE}")
        self._place()

        self.canvas = tk.Canvas(
            root,
            width=SIZE,
            height=SIZE,
            highlightthickness=0,
            borderwidth=0,
            background=background,
            cursor="hand2",
        )
        self.canvas.pack()
        self._body = self.canvas.create_image(
            0, 0, anchor="nw", image=self._images[pet.body_frame]
        )
        self._eyes = self.canvas.create_image(
            0, 0, anchor="nw", image=self._images[pet.eye_frame]
        )

        self.menu = tk.Menu(root, tearoff=0, font=("微软雅黑", 10))
        self.menu.add_command(label=STOP_LABEL, command=self._toggle_move)
        self.menu.add_command(label=CLOSE_LABEL, command=self.close)

        self.canvas.bind("<ButtonPress-1>", self._on_press)
        self.canvas.bind("<B1-Motion>", self._on_drag)
        self.canvas.bind("<ButtonRelease-1>", self._on_release)
        self.canvas.bind("<Button-3>", self._on_menu)
        root.protocol("WM_DELETE_WINDOW", self.close)

        try:
            self._setup_links()
        except OSError:
            messagebox.showwarning("提示", SERVER_FAILED, parent=root)
            self.close()
            return

        self._schedule("blink", BLINK_MS, self._blink)
        self._schedule("move", MOVE_MS, self._move)
        if self._links:
            self._schedule("link", LINK_MS, self._poll_links)

    def _load(self, name: str):
        path = self.image_dir / name
        if not path.is_file():
            raise FileNotFoundError(f"missing image: {path}")
        image = self._tk.PhotoImage(file=str(path))
        factor = math.ceil(max(image.width(), image.height()) / SIZE)
        return image.subsample(factor) if factor > 1 else image

    def _make_transparent(self) -> str:
        if sys.platform.startswith("win"):
            self.root.attributes("-transparentcolor", _KEY_COLOUR)
            self.root.configure(background=_KEY_COLOUR)
            return _KEY_COLOUR
        if sys.platform == "darwin":
            self.root.attributes("-transparent", True)
            self.root.configure(background="systemTransparent")
            return "systemTransparent"
        return self.root.cget("background")

    def _setup_links(self) -> None:
        pet = self.pet
        instance = pet.instance_id
        if instance == 0:
            pair = PairStacker()
            self._links.append(
                PositionServer(
                    FIRST_LINK,
                    provide=lambda: pet.position,
                    receive=lambda point: pair.check(pet, point),
                )
            )
        elif instance == 1:
            stacker = MiddleStacker()
            latest = {"a": ABSENT, "c": ABSENT}

            def setter(key: str) -> Callable[[Point], None]:
                def receive(point: Point) -> None:
                    latest[key] = point
                    stacker.check(pet, latest["a"], latest["c"])

                return receive

            def forget(key: str) -> Callable[[], None]:
                def on_error() -> None:
                    latest[key] = ABSENT

                return on_error

            self._links.append(
                PositionServer(
                    SECOND_LINK,
                    provide=lambda: stacker.to_c,
                    receive=setter("c"),
                    on_error=forget("c"),
                )
            )
            self._links.append(
                PositionClient(
                    [FIRST_LINK],
                    provide=lambda: stacker.to_a,
                    receive=setter("a"),
                    on_error=forget("a"),
                )
            )
        else:
            pair = PairStacker()
            self._links.append(
                PositionClient(
                    [SECOND_LINK, FIRST_LINK],
                    provide=lambda: pet.position,
                    receive=lambda point: pair.check(pet, point),
                )
            )

    def _schedule(self, key: str, delay: int, callback: Callable[[], None]) -> None:
        if not self._closed:
            self._jobs[key] = self.root.after(delay, callback)

    def _place(self) -> None:
        x, y = self.pet.position.x, self.pet.position.y
        self.root.geometry(f"+{x}+{y}")

    def _blink(self) -> None:
        frame = self.pet.blink_tick()
        self.canvas.itemconfigure(self._eyes, image=self._images[frame])
        self._schedule("blink", BLINK_MS, self._blink)

    def _move(self) -> None:
        frame = self.pet.move_tick()
        self.canvas.itemconfigure(self._body, image=self._images[frame])
        self._place()
        self._schedule("move", MOVE_MS, self._move)

    def _poll_links(self) -> None:
        for link in self._links:
            link.poll()
        self._place()
        self._schedule("link", LINK_MS, self._poll_links)

    def _on_press(self, event) -> None:
        self._drag_start = (event.x, event.y)
        self.pet.press()

    def _on_drag(self, event) -> None:
        start_x, start_y = self._drag_start
        self.pet.drag(event.x - start_x, event.y - start_y)
        self._place()

    def _on_release(self, event) -> None:
        self.pet.release()

    def _on_menu(self, event) -> None:
        try:
            self.menu.tk_popup(event.x_root, event.y_root)
        finally:
            self.menu.grab_release()

    def _toggle_move(self) -> None:
        can_move = self.pet.toggle_move()
        self.menu.entryconfigure(0, label=STOP_LABEL if can_move else MOVE_LABEL)

    def close(self) -> None:
        """Stop the timers, drop the links and destroy the window."""
        if self._closed:
            return
        self._closed = True
        for job in self._jobs.values():
            self.root.after_cancel(job)
        self._jobs.clear()
        for link in self._links:
            link.close()
        self._links.clear()
        self.root.destroy()


def _screen_bounds(root) -> ScreenBounds:
    width = root.winfo_screenwidth()
    height = root.winfo_screenheight()
    return ScreenBounds(left=0, top=0, right=width - 1, bottom=height - 1)


def _start_position(instance_id: int, screen: ScreenBounds) -> Point:
    x = screen.left + (screen.right - screen.left) // 2 + instance_id * SIZE * 2
    x = min(x, screen.right - SIZE - 2)
    y = screen.bottom - SIZE * 2
    return Point(x, y)


def build_parser() -> argparse.ArgumentParser:
    """The command-line parser for the pet program."""
    parser = argparse.ArgumentParser(
        prog=TITLE, description="Show a small walking pet on the desktop."
    )
    parser.add_argument(
        "--image-dir",
        type=Path,
        default=Path(__file__).resolve().parent / "images",
        help="directory holding the pet images",
    )
    parser.add_argument(
        "--state-dir",
        type=Path,
        default=Path(tempfile.gettempdir()),
        help="directory for the shared table of running pets",
    )
    return parser


def main(argv=None) -> int:
    """Start one pet if a slot is free; return the exit status."""
    args = build_parser().parse_args(argv)
    registry = SlotRegistry(args.state_dir / REGISTRY_NAME, MAX_INSTANCES)
    try:
        slot_id = registry.acquire()
    except NoFreeSlot:
        print(FULL_MESSAGE, file=sys.stderr)
        return 0

    try:
        import tkinter as tk

        try:
            root = tk.Tk()
        except tk.TclError as exc:
            print(f"{TITLE}: cannot open a window: {exc}", file=sys.stderr)
            return 1
        screen = _screen_bounds(root)
        pet = Pet(slot_id, _start_position(slot_id, screen), screen)
        try:
            PetWindow(root, pet, args.image_dir)
        except FileNotFoundError as exc:
            root.destroy()
            print(f"{TITLE}: {exc}", file=sys.stderr)
            return 1
        root.mainloop()
        return 0
    finally:
        registry.release(slot_id)


if __name__ == "__main__":
    sys.exit(main())