from string import Template

from pollframe.core.models.inputs import KEY_SLOTS
from pollframe.core.render.encoding import FrameEncoding

_PAGE = Template("""\
<!DOCTYPE html>
<canvas width="$width" height="$height"></canvas>
<script>
  const keys = Array($key_slots).fill(0);
  onkeydown = (e) => { if (e.keyCode < keys.length) keys[e.keyCode] = 1; };
  onkeyup = (e) => { if (e.keyCode < keys.length) keys[e.keyCode] = 0; };
  onload = async () => {
    const ctx = document.querySelector("canvas").getContext("2d");
    while (true) {
      const res = await fetch("/", { method: "POST", body: keys.join("") });
      const pixels = new Uint8ClampedArray(await $decode);
      ctx.putImageData(new ImageData(pixels, $width, $height), 0, 0);
    }
  };
</script>
""")

_DECODERS = {
    FrameEncoding.raw: "res.arrayBuffer()",
    FrameEncoding.json: "res.json()",
}


def render_page(
    width: int,
    height: int,
    key_slots: int = KEY_SLOTS,
    encoding: FrameEncoding = FrameEncoding.raw,
) -> bytes:
    """
    Build the bootstrap document served on ``GET /``.

    The page keeps one flag per key code, posts them to ``/`` as the body of
    every request, and paints each response into a canvas of the agreed
    size as soon as it arrives, which immediately triggers the next POST.
    """
    return _PAGE.substitute(
        width=width,
        height=height,
        key_slots=key_slots,
        decode=_DECODERS[encoding],
    ).encode("utf-8")
