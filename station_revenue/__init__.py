"""
Station Revenue Processing Modules
==================================

Processing pipeline modules in execution order:
1. parse_settlement_files.py - Extract station revenue from monthly settlement workbooks
2. revenue_summary.py - Aggregate revenue into station, yearly and monthly tables
3. report_writer.py - Write the three-sheet summary workbook
4. revenue_processor.py - Main processor tying the stages together
"""
