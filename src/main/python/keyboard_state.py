# SPDX-License-Identifier: GPL-2.0-or-later
"""
Key table of a keyboard model, as seen by the user data compiler.

The model-specific table is provided from outside (keyboard detection and the
model database are not part of this package); only the lookup from driver value
to key location code is needed here.
"""


class KeyboardState:

    def __init__(self, model_id=0, keys=None):
        self.model_id = model_id
        # driver value (uint32) -> location code (int)
        self.driver_value_to_location_code = dict()
        if keys:
            for driver_value, location_code in keys:
                self.add_key(driver_value, location_code)

    def add_key(self, driver_value, location_code):
        self.driver_value_to_location_code[driver_value] = location_code

    def get_location_code(self, driver_value):
        return self.driver_value_to_location_code.get(driver_value)

    def __repr__(self):
        return "KeyboardState<model=0x{:08X} keys={}>".format(self.model_id, len(self.driver_value_to_location_code))
