#!/usr/bin/env python3
"""vcard-parser from a source checkout.  Run with:  python3 start.py show contacts.vcf"""
import os
import sys

script_dir = os.path.dirname(os.path.abspath(__file__))
src_dir    = os.path.join(script_dir, "src")

sys.path.insert(0, src_dir)
os.environ["PYTHONPATH"] = src_dir + os.pathsep + os.environ.get("PYTHONPATH", "")

from vcard_parser.cli import app
app()
