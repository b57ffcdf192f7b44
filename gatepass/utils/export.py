"""
Export utilities for generating Excel and CSV exports
"""

import csv
import io
from io import BytesIO
from datetime import datetime

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter


def export_to_excel(data, columns, title="Report", sheet_name="Data"):
    """
    Export data to Excel format

    Args:
        data: List of dictionaries or list of lists containing the data
        columns: List of column headers or dict mapping keys to display names
        title: Report title for the header
        sheet_name: Name of the worksheet

    Returns:
        BytesIO object containing the Excel file
    """
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name

    # Styles
    header_font = Font(bold=True, color="FFFFFF", size=11)
    header_fill = PatternFill(start_color="1E40AF", end_color="1E40AF", fill_type="solid")
    title_font = Font(bold=True, size=14)
    date_font = Font(italic=True, size=10, color="666666")
    thin_border = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )

    # Title
    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=len(columns))
    title_cell = ws.cell(row=1, column=1, value=title)
    title_cell.font = title_font
    title_cell.alignment = Alignment(horizontal='center')

    # Date
    ws.merge_cells(start_row=2, start_column=1, end_row=2, end_column=len(columns))
    date_cell = ws.cell(row=2, column=1, value=f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    date_cell.font = date_font
    date_cell.alignment = Alignment(horizontal='center')

    # Headers
    header_row = 4
    if isinstance(columns, dict):
        headers = list(columns.values())
        keys = list(columns.keys())
    else:
        headers = columns
        keys = columns

    for col_idx, header in enumerate(headers, 1):
        cell = ws.cell(row=header_row, column=col_idx, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal='center')
        cell.border = thin_border

    # Data rows
    for row_idx, row_data in enumerate(data, header_row + 1):
        for col_idx, key in enumerate(keys, 1):
            if isinstance(row_data, dict):
                value = row_data.get(key, '')
            else:
                value = row_data[col_idx - 1] if col_idx - 1 < len(row_data) else ''

            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            cell.border = thin_border
            cell.alignment = Alignment(horizontal='right' if isinstance(value, (int, float)) else 'left')

    # Adjust column widths
    for col_idx in range(1, len(headers) + 1):
        column_letter = get_column_letter(col_idx)
        max_length = max((len(str(cell.value)) for cell in ws[column_letter][header_row - 1:]
                          if cell.value is not None), default=0)
        ws.column_dimensions[column_letter].width = min(max_length + 2, 50)

    # Save to BytesIO
    output = BytesIO()
    wb.save(output)
    output.seek(0)
    return output


def export_to_csv(data, columns, include_header=True):
    """
    Export data to CSV format

    Args:
        data: List of dictionaries or list of lists containing the data
        columns: List of column headers or dict mapping keys to display names
        include_header: Whether to include header row

    Returns:
        BytesIO object containing the CSV file
    """
    if isinstance(columns, dict):
        headers = list(columns.values())
        keys = list(columns.keys())
    else:
        headers = columns
        keys = columns

    text_output = io.StringIO()
    writer = csv.writer(text_output)

    if include_header:
        writer.writerow(headers)

    for row_data in data:
        if isinstance(row_data, dict):
            row = [row_data.get(key, '') for key in keys]
        else:
            row = row_data
        writer.writerow(row)

    output = BytesIO()
    output.write(text_output.getvalue().encode('utf-8-sig'))  # BOM for Excel compatibility
    output.seek(0)
    return output


def export_gate_passes(records, format_type='excel'):
    """
    Export the gate pass history, one row per product line

    Args:
        records: List of GatePassRecord
        format_type: 'excel' or 'csv'

    Returns:
        BytesIO object with the file
    """
    columns = {
        'number': 'Gate Pass #',
        'date': 'Date',
        'to': 'To',
        'product_id': 'Product ID',
        'name': 'Item',
        'transport': 'Mode of Transport',
        'type': 'Type',
        'quantity': 'Qty',
        'prepared_by': 'Prepared By',
        'checked_by': 'Checked By',
        'authorized_by': 'Authorized By'
    }

    data = []
    for record in records:
        for line in record.products:
            data.append({
                'number': record.gate_pass_number,
                'date': record.date,
                'to': record.to,
                'product_id': line.get('productId') or '',
                'name': line.get('name') or '',
                'transport': line.get('transport') or '',
                'type': line.get('type') or '',
                'quantity': int(line.get('selectedQuantity') or 0),
                'prepared_by': record.prepared_by,
                'checked_by': record.checked_by,
                'authorized_by': record.authorized_by
            })

    if format_type == 'excel':
        return export_to_excel(data, columns, title="Gate Pass History", sheet_name="Gate Passes")
    else:
        return export_to_csv(data, columns)


def export_inventory_report(products, format_type='excel'):
    """
    Export the current stock list

    Args:
        products: List of ProductSnapshot
        format_type: 'excel' or 'csv'

    Returns:
        BytesIO object with the file
    """
    columns = {
        'product_id': 'Product ID',
        'name': 'Product Name',
        'type': 'Type',
        'transport': 'Mode of Transport',
        'quantity': 'Qty',
        'from': 'From',
        'to': 'To',
        'remarks': 'Remarks'
    }

    data = [{
        'product_id': product.product_id,
        'name': product.name,
        'type': product.product_type,
        'transport': product.transport,
        'quantity': product.quantity,
        'from': product.from_location,
        'to': product.to_location,
        'remarks': product.remarks
    } for product in products]

    if format_type == 'excel':
        return export_to_excel(data, columns, title="Inventory Report", sheet_name="Inventory")
    else:
        return export_to_csv(data, columns)
