"""
Transaction lifecycle: assemble, encode, sign, submit, confirm.
"""
