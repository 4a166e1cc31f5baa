import inquirer

from network_utils import list_interface_names


def print_boxed(lines):
    """
    Prints the given lines inside a border.
    """
    width = max(len(line) for line in lines)
    border = "+" + "-" * (width + 2) + "+"

    print(border)
    for line in lines:
        print(f"| {line.ljust(width)} |")
    print(border)


def print_arp_table(interface, table):
    """
    Prints the hosts that answered on an interface, in the order they answered.
    """
    lines = [f"Interface: {interface}", f"Hosts:     {len(table)}"]
    lines.extend(f"{str(entry.ip):<16} {entry.mac}" for entry in table)
    print_boxed(lines)


def print_scan_error(error):
    print(f"❌ {error}")


def select_interfaces():
    """
    Lets the user pick the interfaces to scan.
    Returns a list of interface names, empty if the prompt was cancelled.
    """
    names = list_interface_names()
    questions = [
        inquirer.Checkbox(
            "interfaces",
            message="Select the interfaces to scan",
            choices=names,
        )
    ]
    answer = inquirer.prompt(questions)
    if answer is None:
        return []

    return answer["interfaces"]
