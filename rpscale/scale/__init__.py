"""Scale readings, frame splitting, capabilities, shared state and stability tracking."""