"""
Fixed-geometry label layouts.

A layout is a flat tree of positioned drawing nodes in CSS pixels
(96 px per inch). The outer box label is 576 x 310 px (6" x 3.23"), the
inner reel label 298 x 154 px (3.1" x 1.6"). Nothing here draws; the
rasterizer turns a layout into a bitmap.

Outer layout:
+--------------------------------------------------+
|               SUPPLIER / VENDOR NAME             |
+------------------------------+-------------------+
| PO Number: |||||||| | PO Line|      [QR]         |
| HU: |||||||||||||||           |                   |
| IBD: ||||||  | Batch: |||||  | Vendor Lot: ...   |
| SanDisk PN: |||||| | Quantity| Expiry Date: ...  |
| MPN: ||||||  | Date Code     | COO / Box / Date  |
|                              | Rev: ..   Num: .. |
+------------------------------+-------------------+
"""

from dataclasses import dataclass, field
from typing import Union

from label_service.models.label_record import LabelRecord, LabelSize, LabelType
from label_service.label_generation.payload import build_qr_payload

PIXELS_PER_INCH = 96
MM_PER_INCH = 25.4

NO_DATA_TEXT = "No Data"
NO_DATA_COLOR = "#9ca3af"
SUPPLIER_PLACEHOLDER = "Supplier / Vendor Name"


@dataclass(frozen=True)
class TextNode:
    """Single line of text, clipped with an ellipsis to its width."""

    x: float
    y: float
    width: float
    height: float
    text: str
    font_size: float
    bold: bool = False
    align: str = "left"  # left | center | right
    underline: bool = False
    color: str = "black"


@dataclass(frozen=True)
class LabeledTextNode:
    """Bold caption followed by a value on one line."""

    x: float
    y: float
    width: float
    height: float
    caption: str
    value: str
    font_size: float
    spread: bool = False  # Value pushed to the right edge
    value_bold: bool = False


@dataclass(frozen=True)
class BarcodeNode:
    """CODE128 barcode of a raw field value, optionally with the value below."""

    x: float
    y: float
    width: float
    height: float
    value: str
    bar_height: float
    module_width: float
    show_text: bool = True
    font_size: float = 9


@dataclass(frozen=True)
class QRNode:
    """Square QR code of the label payload."""

    x: float
    y: float
    size: float
    payload: str


@dataclass(frozen=True)
class RuleNode:
    """Straight line."""

    x0: float
    y0: float
    x1: float
    y1: float
    width: float = 1
    color: str = "black"


@dataclass(frozen=True)
class BoxNode:
    """Rectangle outline."""

    x: float
    y: float
    width: float
    height: float
    border_width: float
    color: str = "black"


LayoutNode = Union[TextNode, LabeledTextNode, BarcodeNode, QRNode, RuleNode, BoxNode]


@dataclass(frozen=True)
class LayoutPreset:
    """Physical format and the field regions it shows."""

    size: LabelSize
    width_in: float
    height_in: float
    border_width: int
    border_color: str
    padding: int
    regions: dict = field(default_factory=dict, compare=False)

    @property
    def width_px(self) -> int:
        return round(self.width_in * PIXELS_PER_INCH)

    @property
    def height_px(self) -> int:
        return round(self.height_in * PIXELS_PER_INCH)


@dataclass(frozen=True)
class LabelLayout:
    """A rendered label, ready for rasterization."""

    size: LabelSize
    label_type: LabelType
    width_px: int
    height_px: int
    width_in: float
    height_in: float
    qr_payload: str
    nodes: tuple[LayoutNode, ...]

    def text_content(self) -> list[str]:
        """Every human-readable string and barcode value, in drawing order."""
        content = []
        for node in self.nodes:
            if isinstance(node, TextNode):
                content.append(node.text)
            elif isinstance(node, LabeledTextNode):
                content.append(f"{node.caption} {node.value}")
            elif isinstance(node, BarcodeNode):
                content.append(node.value)
        return content

    def find(self, node_type: type) -> list[LayoutNode]:
        return [node for node in self.nodes if isinstance(node, node_type)]


# Region maps. Barcode cells: (caption, field, width fraction, empty mode)
# Text cells: (caption, field, width fraction, align)
OUTER_REGIONS = {
    "rows": (
        (("barcode", "PO Number:", "po_number", 2 / 3, "placeholder"),
         ("text", "PO Line:", "po_line", 1 / 3, "center")),
        (("barcode", "HU:", "hu_number", 1.0, "placeholder"),),
        (("barcode", "IBD:", "ibd_number", 1 / 2, "blank"),
         ("barcode", "Batch:", "batch_number", 1 / 2, "placeholder")),
        (("barcode", "SanDisk PN:", "sandisk_pn", 0.6, "placeholder"),
         ("text", "Quantity:", "quantity", 0.4, "right")),
        (("barcode", "MPN:", "mpn", 1 / 2, "placeholder"),
         ("text", "Date Code:", "date_code", 1 / 2, "center")),
    ),
    # (caption, field, stacked)
    "details": (
        ("Vendor Lot:", "vendor_lot", True),
        ("Expiry Date:", "expiry_date", True),
        ("COO:", "coo", False),
        ("Box No:", "box_no", False),
        ("Date:", "print_date", False),
    ),
    "substrate": (("Rev:", "rev"), ("Num:", "num")),
}

INNER_REGIONS = {
    "barcodes": (("HU:", "hu_number"), ("PN:", "sandisk_pn")),
    "text_grid": (
        ("V/Lot:", "vendor_lot"),
        ("MPN:", "mpn"),
        ("DC:", "date_code"),
        ("Exp Date:", "expiry_date"),
        ("IBD:", "ibd_number"),
    ),
    "top_right": (("PO. No.:", "po_number"), ("PO Line:", "po_line"), ("Batch:", "batch_number")),
    "bottom_right": (("MSL:", "msl"), ("COO:", "coo"), ("Qty:", "quantity")),
    "substrate": (("Rev:", "rev"), ("Num:", "num")),
}

PRESETS: dict[LabelSize, LayoutPreset] = {
    LabelSize.OUTER: LayoutPreset(
        size=LabelSize.OUTER,
        width_in=6.0,
        height_in=3.23,
        border_width=2,
        border_color="black",
        padding=8,
        regions=OUTER_REGIONS
    ),
    LabelSize.INNER: LayoutPreset(
        size=LabelSize.INNER,
        width_in=3.1,
        height_in=1.6,
        border_width=1,
        border_color="#d1d5db",
        padding=4,
        regions=INNER_REGIONS
    ),
}


def get_preset(size: LabelSize | str) -> LayoutPreset:
    return PRESETS[LabelSize(size)]


class LabelRenderer:
    """Arranges a label record into one of the two fixed layouts."""

    # Outer geometry
    OUTER_HEADER_FONT = 14
    OUTER_CAPTION_FONT = 9
    OUTER_VALUE_FONT = 13
    OUTER_BAR_HEIGHT = 12
    OUTER_MODULE_WIDTH = 1.3
    OUTER_LEFT_FRACTION = 0.66
    OUTER_QR_MM = 20

    # Inner geometry
    INNER_CAPTION_FONT = 7
    INNER_TEXT_FONT = 6
    INNER_LINE_PITCH = 8
    INNER_BAR_HEIGHT = 9
    INNER_MODULE_WIDTH = 1.0
    INNER_LEFT_FRACTION = 0.65
    INNER_QR_SIZE = 36

    def render(
        self,
        record: LabelRecord,
        size: LabelSize | str = LabelSize.OUTER,
        label_type: LabelType | str = LabelType.SUBSTRATE
    ) -> LabelLayout:
        """
        Render a record at one of the fixed sizes.

        Args:
            record: Current label record (read only)
            size: outer or inner
            label_type: substrate labels also show rev/num

        Returns:
            LabelLayout sized to the preset's pixel footprint
        """
        preset = get_preset(size)
        label_type = LabelType(label_type)
        payload = build_qr_payload(record, label_type)

        nodes: list[LayoutNode] = [
            BoxNode(0, 0, preset.width_px, preset.height_px, preset.border_width, preset.border_color)
        ]
        if preset.size is LabelSize.OUTER:
            nodes.extend(self._arrange_outer(record, preset, label_type, payload))
        else:
            nodes.extend(self._arrange_inner(record, preset, label_type, payload))

        return LabelLayout(
            size=preset.size,
            label_type=label_type,
            width_px=preset.width_px,
            height_px=preset.height_px,
            width_in=preset.width_in,
            height_in=preset.height_in,
            qr_payload=payload,
            nodes=tuple(nodes)
        )

    def _barcode_or_placeholder(
        self,
        value: str,
        x: float,
        y: float,
        width: float,
        bar_height: float,
        module_width: float,
        show_text: bool,
        font_size: float,
        empty: str = "placeholder"
    ) -> list[LayoutNode]:
        if value:
            text_height = font_size + 2 if show_text else 0
            return [BarcodeNode(
                x, y, width, bar_height + text_height, value,
                bar_height=bar_height,
                module_width=module_width,
                show_text=show_text,
                font_size=font_size
            )]
        if empty == "blank":
            return []
        return [TextNode(x, y, width, 10, NO_DATA_TEXT, 7, color=NO_DATA_COLOR)]

    def _arrange_outer(
        self,
        record: LabelRecord,
        preset: LayoutPreset,
        label_type: LabelType,
        payload: str
    ) -> list[LayoutNode]:
        inset = preset.border_width + preset.padding
        left, top = inset, inset
        right = preset.width_px - inset
        bottom = preset.height_px - inset
        inner_width = right - left
        regions = preset.regions

        nodes: list[LayoutNode] = []

        # Header: supplier name
        supplier = record.supplier_name or SUPPLIER_PLACEHOLDER
        nodes.append(TextNode(left, top, inner_width, 17, supplier.upper(), self.OUTER_HEADER_FONT, bold=True, align="center"))
        nodes.append(RuleNode(left, top + 21, right, top + 21, width=2))
        body_top = top + 25

        # Left column: barcode rows
        column_right = left + round(inner_width * self.OUTER_LEFT_FRACTION)
        cells_right = column_right - 4
        cells_width = cells_right - left
        rows = regions["rows"]
        row_height = (bottom - body_top) // len(rows)

        for row_index, row in enumerate(rows):
            row_top = body_top + row_index * row_height
            cell_left = left
            for cell_index, (kind, caption, attr, fraction, mode) in enumerate(row):
                cell_width = round(cells_width * fraction)
                is_last = cell_index == len(row) - 1
                if is_last:
                    cell_width = cells_right - cell_left
                else:
                    nodes.append(RuleNode(cell_left + cell_width, row_top, cell_left + cell_width, row_top + row_height))

                pad_left = 4 if cell_index > 0 else 0
                pad_right = 4 if not is_last else 0
                cx = cell_left + pad_left
                cw = cell_width - pad_left - pad_right
                value = getattr(record, attr)

                if kind == "barcode":
                    nodes.append(TextNode(cx, row_top + 6, cw, 11, caption, self.OUTER_CAPTION_FONT, bold=True))
                    nodes.extend(self._barcode_or_placeholder(
                        value, cx, row_top + 19, cw,
                        bar_height=self.OUTER_BAR_HEIGHT,
                        module_width=self.OUTER_MODULE_WIDTH,
                        show_text=True,
                        font_size=self.OUTER_CAPTION_FONT,
                        empty=mode
                    ))
                else:
                    nodes.append(TextNode(cx, row_top + 6, cw, 11, caption, self.OUTER_CAPTION_FONT, bold=True))
                    nodes.append(RuleNode(cx, row_top + 19, cx + cw, row_top + 19))
                    nodes.append(TextNode(cx, row_top + 24, cw - (4 if mode == "right" else 0), 14, value, self.OUTER_VALUE_FONT, bold=True, align=mode))

                cell_left += cell_width

            if row_index < len(rows) - 1:
                nodes.append(RuleNode(left, row_top + row_height, cells_right, row_top + row_height))

        # Right column: QR, details, substrate strip
        nodes.append(RuleNode(column_right, body_top, column_right, bottom))
        col_left = column_right + 8
        col_width = right - col_left

        qr_size = round(self.OUTER_QR_MM / MM_PER_INCH * PIXELS_PER_INCH)
        qr_top = body_top + 4
        nodes.append(QRNode(col_left + (col_width - qr_size) // 2, qr_top, qr_size, payload))

        y = qr_top + qr_size + 8
        line = 12
        for caption, attr, stacked in regions["details"]:
            value = getattr(record, attr)
            if attr == "print_date":
                y += 4
            if stacked:
                nodes.append(TextNode(col_left, y, col_width, line, caption, self.OUTER_CAPTION_FONT, bold=True, underline=True))
                nodes.append(TextNode(col_left, y + line, col_width, line, value, self.OUTER_CAPTION_FONT))
                y += 2 * line
            else:
                nodes.append(LabeledTextNode(col_left, y, col_width, line, caption, value, self.OUTER_CAPTION_FONT))
                y += line

        if label_type is LabelType.SUBSTRATE:
            strip_top = bottom - 17
            nodes.append(RuleNode(col_left, strip_top, right, strip_top))
            (rev_caption, rev_attr), (num_caption, num_attr) = regions["substrate"]
            half = col_width // 2
            nodes.append(TextNode(col_left, strip_top + 4, half, 11, f"{rev_caption} {getattr(record, rev_attr)}", self.OUTER_CAPTION_FONT, bold=True))
            nodes.append(TextNode(col_left + half, strip_top + 4, col_width - half, 11, f"{num_caption} {getattr(record, num_attr)}", self.OUTER_CAPTION_FONT, bold=True, align="right"))

        return nodes

    def _arrange_inner(
        self,
        record: LabelRecord,
        preset: LayoutPreset,
        label_type: LabelType,
        payload: str
    ) -> list[LayoutNode]:
        inset = preset.border_width + preset.padding
        left, top = inset, inset
        right = preset.width_px - inset
        bottom = preset.height_px - inset
        inner_width = right - left
        regions = preset.regions
        pitch = self.INNER_LINE_PITCH

        nodes: list[LayoutNode] = []

        # Left column: HU and PN barcodes, then the text grid
        column_right = left + round(inner_width * self.INNER_LEFT_FRACTION)
        cw = column_right - 4 - left

        y = top
        for caption, attr in regions["barcodes"]:
            value = getattr(record, attr)
            nodes.append(LabeledTextNode(left, y, cw, 8, caption, value, self.INNER_CAPTION_FONT))
            nodes.extend(self._barcode_or_placeholder(
                value, left, y + 9, cw,
                bar_height=self.INNER_BAR_HEIGHT,
                module_width=self.INNER_MODULE_WIDTH,
                show_text=False,
                font_size=0
            ))
            y += 27

        grid = regions["text_grid"]
        y = bottom - len(grid) * pitch
        for caption, attr in grid:
            nodes.append(LabeledTextNode(left, y, cw, pitch, caption, getattr(record, attr), self.INNER_TEXT_FONT))
            y += pitch

        # Right column: PO/batch, QR, metadata
        nodes.append(RuleNode(column_right, top, column_right, bottom))
        col_left = column_right + 4
        col_width = right - col_left

        y = top
        for caption, attr in regions["top_right"]:
            nodes.append(LabeledTextNode(col_left, y, col_width, pitch, caption, getattr(record, attr), self.INNER_TEXT_FONT, spread=True))
            y += pitch
        qr_area_top = y

        bottom_rows = [(caption, attr, False) for caption, attr in regions["bottom_right"]]
        if label_type is LabelType.SUBSTRATE:
            bottom_rows += [(caption, attr, True) for caption, attr in regions["substrate"]]
        bottom_top = bottom - len(bottom_rows) * pitch

        qr_size = self.INNER_QR_SIZE
        nodes.append(QRNode(
            col_left + (col_width - qr_size) // 2,
            qr_area_top + (bottom_top - qr_area_top - qr_size) // 2,
            qr_size,
            payload
        ))

        y = bottom_top
        for caption, attr, bold in bottom_rows:
            nodes.append(LabeledTextNode(col_left, y, col_width, pitch, caption, getattr(record, attr), self.INNER_TEXT_FONT, spread=True, value_bold=bold))
            y += pitch

        return nodes
