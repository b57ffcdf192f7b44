"""
PDF Generation Utilities
Printable gate pass document
"""

from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.graphics.barcode.code128 import Code128
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

LINE_COLUMNS = ['S.No', 'Mode of Transport', 'Item Description', 'Qty',
                'From (site)', 'To', 'Type', 'Remarks']

BLANK_SIGNATURE = '_______________'


def _item_description(line):
    name = line.get('name') or ''
    description = line.get('description') or ''
    text = f"{name} - {description}" if description else name
    return escape(text)


def generate_gate_pass_pdf(record, site_name='Vemagiri GIS',
                           organization='Power Grid Corporation of India Ltd'):
    """
    Generate the printable gate pass

    Args:
        record: GatePassRecord
        site_name: Issuing substation, printed in the header and as the
            "From" of every line
        organization: Organization printed in the header

    Returns:
        BytesIO: PDF document
    """
    output = BytesIO()
    doc = SimpleDocTemplate(
        output,
        pagesize=landscape(A4),
        leftMargin=15 * mm, rightMargin=15 * mm,
        topMargin=12 * mm, bottomMargin=12 * mm,
        title=f"Gate Pass {record.gate_pass_number}"
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle('GatePassTitle', parent=styles['Title'], fontSize=20, spaceAfter=4)
    header_style = ParagraphStyle('GatePassHeader', parent=styles['Heading2'], alignment=1, spaceAfter=2)
    cell_style = ParagraphStyle('GatePassCell', parent=styles['BodyText'], fontSize=9, leading=11)

    story = [
        Paragraph('Gate Pass', title_style),
        Paragraph(escape(organization.upper()), header_style),
        Paragraph(escape(f"{site_name.upper()}."), header_style),
        Spacer(1, 6 * mm),
    ]

    # Number, date and barcode of the gate pass number
    meta = Table(
        [[f"Gate Pass No: {record.gate_pass_number}", f"Date: {record.date}",
          Code128(record.gate_pass_number, barHeight=10 * mm, barWidth=0.9)
          if record.gate_pass_number else '']],
        colWidths=[90 * mm, 60 * mm, 117 * mm]
    )
    meta.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (1, 0), 'Helvetica-Bold'),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('ALIGN', (2, 0), (2, 0), 'RIGHT'),
    ]))
    story.extend([meta, Spacer(1, 4 * mm)])

    rows = [LINE_COLUMNS]
    for line_number, line in enumerate(record.products, 1):
        rows.append([
            str(line_number),
            line.get('transport') or '',
            Paragraph(_item_description(line), cell_style),
            str(line.get('selectedQuantity') or 0),
            site_name,
            record.to,
            line.get('type') or '',
            Paragraph(escape(line.get('remarks') or ''), cell_style),
        ])
    rows.append(['', '', 'Total', str(record.total_quantity), '', '', '', ''])

    lines_table = Table(
        rows,
        colWidths=[12 * mm, 30 * mm, 70 * mm, 15 * mm, 32 * mm, 38 * mm, 25 * mm, 45 * mm],
        repeatRows=1
    )
    lines_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#1E40AF')),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.black),
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ('ALIGN', (3, 1), (3, -1), 'RIGHT'),
    ]))
    story.extend([lines_table, Spacer(1, 20 * mm)])

    signatures = Table(
        [
            [record.prepared_by or BLANK_SIGNATURE,
             record.checked_by or BLANK_SIGNATURE,
             record.authorized_by or BLANK_SIGNATURE],
            ['Prepared By', 'Checked By', 'Authorized By'],
        ],
        colWidths=[89 * mm, 89 * mm, 89 * mm]
    )
    signatures.setStyle(TableStyle([
        ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
        ('FONTNAME', (0, 1), (-1, 1), 'Helvetica-Bold'),
    ]))
    story.append(signatures)

    doc.build(story)
    output.seek(0)
    return output
