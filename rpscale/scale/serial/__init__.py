"""Discovery of serial devices that may be a scale."""