"""
Delivery-level validation.

- pallet_scenario: WITH/WITHOUT pallets detection and document completeness
- checklist: section builders for pallet, ship document and invoice checks
- rollup: overall status and summary from check items
- validators: client policies and the validator registry
"""
